"""
Jobly: job board API over companies, jobs, users and applications.
"""
