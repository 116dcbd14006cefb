"""
audioserve-auth - Shared Secret Authentication

Stateless token authentication for a single-user HTTP service.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable

Modules:
- auth: Token codec, login commitment and the authenticator
- middleware: FastAPI integration
"""

__version__ = "1.0.0"
