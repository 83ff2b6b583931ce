"""
Core business logic for the job board.

Submodules:
- applicants: Applicant filtering, sorting and pagination
- pipeline: Application status transitions and their side effects
- access: Company ownership checks
- exceptions: Error taxonomy shared by all layers
"""
