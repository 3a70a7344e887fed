"""
Data feeds consumed by the Orrery simulation core.
"""
