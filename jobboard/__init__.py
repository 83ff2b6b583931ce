"""
Job board applicant pipeline.

Applicant search (filtering, sorting, pagination) and the application
status pipeline with interview scheduling and applicant notifications.
"""

__version__ = "0.1.0"
__app_name__ = "jobboard"
