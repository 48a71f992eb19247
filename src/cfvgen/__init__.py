"""Training data generation for counterfactual value networks.

Samples random Leduc hold'em situations, labels them with terminal equity
or exact re-solving, and writes bucketed input/target/mask tensors.
"""

__version__ = "0.1.0"
