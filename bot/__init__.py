"""
Bot runtime: configuration, application context, gateway client and services.
"""
