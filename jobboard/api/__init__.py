"""HTTP API for the job board applicant pipeline."""
