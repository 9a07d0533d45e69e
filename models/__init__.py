"""
Graph model package for the Resource Allocation Graph Deadlock Detector.
"""
