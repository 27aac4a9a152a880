"""Career Spark: resume-aware job recommendations and career Q&A."""

__version__ = "0.1.0"
