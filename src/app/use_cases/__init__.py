"""
Use Cases

Organized into domain folders:
- auth/: Join, login, refresh, logout, password and email flows, the
  authorization gate
- sessions/: Listing and revoking the caller's sessions
"""
