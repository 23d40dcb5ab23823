"""
Unit Tests Module

Contains unit tests for individual components:
- environment resolution steps and bootstrap
- localization engine and configuration store
"""
