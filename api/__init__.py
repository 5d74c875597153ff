"""
API package - HTTP surface over the meals view-model.
"""
