"""Recommendation over item similarity networks, plus taste-profile learning.

This package implements a single-user recommendation loop:

Core idea:
- Items ("nodes") are connected by an N x N similarity network
- A user's partial ratings are combined with the network to score every node
- The next node is picked greedily or sampled in proportion to its score
- Similarity networks ("profiles") are learned from populations of users by
  averaging their ratings or clustering them with K-Means
"""
