"""
Document Formatter core.

- formatting: structure analysis, rule engine, TOC/appendix, fallback
- sanitizer: HTML sanitize/normalize/validate
- pipeline: chunked async jobs with progress and cancellation
"""
