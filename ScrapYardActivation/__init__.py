"""
Scrap Yard Activation Django project.

Hosts the activation, user-account and reference-data apps that gate
access to the yard's embedded database.
"""
