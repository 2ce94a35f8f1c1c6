"""
Subject rating service.
"""
