"""
shopdesk.auth

Authentication/authorization package.

Responsibilities:
- Permission catalog and permission-set evaluation.
- Bearer credential parsing/issuing.
- The password verification seam used by login.
- The authorization gate and its FastAPI dependencies.
"""

# Package marker.
