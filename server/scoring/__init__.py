"""
RepoRadar scoring pipeline.

File selection, pattern analyzers, score combination and the narrative layer.
Everything except narrative generation and repository fetching is pure.
"""
