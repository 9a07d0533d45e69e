"""
Utility package for the Resource Allocation Graph Deadlock Detector.
Contains session logging and JSON graph loading.
"""
