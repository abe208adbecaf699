"""pairrank: rank items within a category through pairwise comparisons."""
