"""Projects app package.

Housing projects, their managers and the per-room-type unit inventories
every approval and withdrawal draws from.
"""
