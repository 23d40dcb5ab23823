"""
Domain Layer - Environment Model and Exceptions

Contains the immutable records produced by the runtime layer and the
boot-fatal error taxonomy shared by every resolution step.
"""
