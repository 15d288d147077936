"""
Utility modules for the nametag service.
"""
