"""MySQL provisioning package.

Submodules:
- db: mysql client wrappers (create database, table count, remote access)
- restore: date-stamped .tar.bz2 backup discovery and restore
"""

# Intentionally minimal; logic lives in submodules, driven by hostprov.py.
