"""
Analysis package for the Resource Allocation Graph Deadlock Detector.
Contains session history and the advisory-text collaborator.
"""
