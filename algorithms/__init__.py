"""
Algorithms package for the Resource Allocation Graph Deadlock Detector.
Contains the cycle-based deadlock detector.
"""
