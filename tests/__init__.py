"""
Tests Module

Contains test suites for fxpanel:
- unit: Unit tests for the runtime resolvers, configuration and localization
"""
