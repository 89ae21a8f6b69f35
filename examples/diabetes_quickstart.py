import logging
import numpy as np
from time import perf_counter
from sklearn.datasets import load_diabetes
from stumpreg import StumpRegressor

logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

data = load_diabetes()
X, y = data.data, data.target
feats = list(data.feature_names)

# knock out some values to exercise the MISSING bucket
rng = np.random.default_rng(42)
X = X.copy()
X[rng.random(X.shape) < 0.05] = np.nan

reg = StumpRegressor(feature_names=feats, verbose=1)
t0 = perf_counter(); reg.fit(X, y); print(f"fit: {perf_counter()-t0:.3f} s")
reg.print_tree()
print(f"R^2 on training data: {reg.score(X, y):.3f}")
