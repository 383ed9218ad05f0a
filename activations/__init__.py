"""
Activations app - activation codes, their lifecycle, and the backup server client.
"""
