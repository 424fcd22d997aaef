"""
Command-line front end for imagegen.
"""
