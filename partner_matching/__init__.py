"""
Study partner matching and recommendation engine.
"""
