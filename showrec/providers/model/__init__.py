"""Score model implementations of IScoreModel.

    - LearnedScoreModel   — 10 → 32 → 16 → 1 feed-forward PyTorch network
                            (optional ``ml`` extra), trained on favourites.
                            Defers to the heuristic until its first
                            successful training pass.
    - HeuristicScoreModel — weighted artist/venue/time affinity squashed
                            through a logistic curve.  Always available.
"""
