"""
Core Module - Configuration, Logging and Localization

Contains core panel components:
- config: Panel configuration with JSON storage
- i18n: Localization engine with strict missing-key handling
- locale_map: Built-in phrase catalogs
- logging_setup: Application logging configuration
"""
