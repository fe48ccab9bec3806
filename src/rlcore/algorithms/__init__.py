"""Learning algorithms: tabular Q-learning and deep Q-learning."""
