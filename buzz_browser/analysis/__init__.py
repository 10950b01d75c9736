"""
Derived views computed from the committed filter: chart points,
top keywords and headline stats
"""
