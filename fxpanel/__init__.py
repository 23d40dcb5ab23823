"""
fxpanel - Admin Panel Core for FXServer

Startup environment resolution and localization for an admin panel that runs
as a managed resource inside a game-server host.

Architecture:
- Runtime Layer: host bridge, environment resolution and bootstrap
- Core Layer: configuration store, logging and localization
- Domain Layer: immutable environment model and the exit-code taxonomy
"""

__version__ = "8.0.1"
__author__ = "fxpanel Team"
__description__ = "Admin panel core for FXServer"
