"""
Games module - Card sets and match setup.

Each game has its own subpackage with:
- Card definitions
- Seeded match setup
"""
