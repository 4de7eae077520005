"""Application package for the Requalify reskilling backend.

This package exposes the service, repository and model modules used by
the FastAPI application. Users own skills, courses and education
records; every response carries hypermedia links and list responses are
wrapped in a paged envelope.
"""
