"""Issues table portlet: static-analysis results per tool and job."""

__version__ = "0.1.0"
