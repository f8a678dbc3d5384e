"""
Farm app: animals housed in color-partitioned barns, kept balanced on every add and remove.
"""
