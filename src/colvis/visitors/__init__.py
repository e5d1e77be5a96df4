# src/colvis/visitors/__init__.py
from .regression import SLRegressionVisitor
from .fourier import FFTVisitor
from .kmeans import KMeansVisitor
from .affinity import AffinityPropVisitor
from .information import EntropyVisitor, ImpurityVisitor
from .activations import SigmoidVisitor, RectifyVisitor
from .loss import LossFunctionVisitor, PolicyLearningLossVisitor

__all__ = [
    "SLRegressionVisitor",
    "FFTVisitor",
    "KMeansVisitor",
    "AffinityPropVisitor",
    "EntropyVisitor",
    "ImpurityVisitor",
    "SigmoidVisitor",
    "RectifyVisitor",
    "LossFunctionVisitor",
    "PolicyLearningLossVisitor",
]
