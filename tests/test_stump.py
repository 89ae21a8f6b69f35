import numpy as np
import pytest
from stumpreg import (Bucket, LearnerKind, SplitScorer, StumpRegressor, UpdateRule,
                      get_strategy, sweep_feature)


def _tiny_reg_dataset():
    """Feature 0 separates the targets, feature 1 is noise with a missing value."""
    X = np.array([[1.0, 5.0], [2.0, None], [3.0, 1.0], [4.0, 2.0]], dtype=object)
    y = np.array([1.0, 1.0, 3.0, 3.0])
    return X, y


def test_strategy_registry():
    learner = get_strategy("regression")
    assert learner is get_strategy(LearnerKind.REGRESSION)
    assert learner.update_rule is UpdateRule.NORMAL
    assert learner.new_accumulator().n_labels == 1
    with pytest.raises(ValueError):
        get_strategy("classification")


def test_sweep_finds_separating_threshold():
    x = np.array([3.0, 1.0, 4.0, 2.0])
    y = np.array([3.0, 1.0, 3.0, 1.0])
    split = sweep_feature(x, y, np.ones(4), feature_index=7)
    assert split.feature_index == 7
    assert split.threshold == pytest.approx(2.5)
    assert split.score == pytest.approx(SplitScorer.PERFECT)
    assert np.allclose(split.values[:2], [1.0, 3.0])
    # no missing weight -> overall mean
    assert split.values[Bucket.MISSING] == pytest.approx(2.0)


def test_sweep_respects_weights():
    x = np.array([1.0, 2.0, 3.0])
    y = np.array([0.0, 10.0, 10.0])
    split = sweep_feature(x, y, np.array([1.0, 1.0, 1.0]))
    assert split.threshold == pytest.approx(1.5)
    # with a heavy first example the other split is still worse
    heavy = sweep_feature(x, y, np.array([100.0, 1.0, 1.0]))
    assert heavy.threshold == pytest.approx(1.5)
    assert split.accumulator.wt[Bucket.TRUE] == pytest.approx(1.0)
    assert heavy.accumulator.wt[Bucket.TRUE] == pytest.approx(100.0)


def test_sweep_constant_feature_has_no_threshold():
    split = sweep_feature(np.ones(4), np.array([1.0, 2.0, 3.0, 4.0]), np.ones(4))
    assert split.threshold == -np.inf
    assert split.accumulator.wt[Bucket.TRUE] == 0.0
    # empty TRUE bucket falls back to the overall mean
    assert split.values[Bucket.TRUE] == pytest.approx(2.5)
    assert split.score == pytest.approx(5.0)


def test_sweep_missing_bucket():
    x = np.array([1.0, np.nan, 2.0, np.nan])
    y = np.array([0.0, 7.0, 1.0, 9.0])
    split = sweep_feature(x, y, np.ones(4))
    assert split.accumulator.wt[Bucket.MISSING] == pytest.approx(2.0)
    assert split.values[Bucket.MISSING] == pytest.approx(8.0)
    # missing residual 2.0, known buckets pure
    assert split.score == pytest.approx(2.0)


def test_sweep_pruned_when_missing_residual_too_large():
    x = np.array([np.nan, np.nan, 1.0, 2.0])
    y = np.array([0.0, 10.0, 1.0, 1.0])
    assert sweep_feature(x, y, np.ones(4), z_best=1.0) is None
    assert sweep_feature(x, y, np.ones(4), z_best=100.0) is not None


def test_sweep_length_mismatch():
    with pytest.raises(ValueError):
        sweep_feature(np.ones(3), np.ones(2), np.ones(3))


def test_regressor_fit_predict():
    X, y = _tiny_reg_dataset()
    regr = StumpRegressor(feature_names=["num", "noise"]).fit(X, y)
    assert regr.feature_index_ == 0
    assert regr.threshold_ == pytest.approx(2.5)
    assert regr.score_ == pytest.approx(0.0)
    pred = regr.predict(X)
    assert pred.shape == y.shape
    assert np.allclose(pred, y)
    assert regr.score(X, y) == pytest.approx(1.0)


def test_regressor_missing_prediction():
    X, y = _tiny_reg_dataset()
    regr = StumpRegressor().fit(X, y)
    pred = regr.predict([[None, 3.0]])
    assert regr.apply([[None, 3.0]])[0] == Bucket.MISSING
    # no training row is missing on feature 0 -> overall mean
    assert pred[0] == pytest.approx(2.0)


def test_regressor_ties_keep_first_feature():
    X = np.array([[1.0, 1.0], [2.0, 2.0], [3.0, 3.0]])
    y = np.array([0.0, 0.0, 1.0])
    regr = StumpRegressor().fit(X, y)
    assert regr.feature_index_ == 0


def test_regressor_sample_weight_validation():
    X, y = _tiny_reg_dataset()
    with pytest.raises(ValueError):
        StumpRegressor().fit(X, y, sample_weight=np.ones(3))
    with pytest.raises(ValueError):
        StumpRegressor().fit(X, y, sample_weight=-np.ones(4))
    with pytest.raises(ValueError):
        StumpRegressor(feature_names=["a"]).fit(X, y)


def test_regressor_not_fitted():
    regr = StumpRegressor()
    with pytest.raises(ValueError):
        regr.predict([[1.0, 2.0]])
    with pytest.raises(ValueError):
        regr.export_rules()


def test_regressor_rules(capsys):
    X, y = _tiny_reg_dataset()
    regr = StumpRegressor(feature_names=["num", "noise"]).fit(X, y)
    rules = regr.export_rules()
    assert len(rules) == 3
    assert rules[0].startswith("num <= 2.5")
    assert all("value=" in r for r in rules)
    traced = regr.predict_rule(X)
    assert traced == ["num <= 2.5", "num <= 2.5", "num > 2.5", "num > 2.5"]
    regr.print_tree()
    out = capsys.readouterr().out
    assert "Predict" in out


def test_regressor_verbose_logs(caplog):
    X, y = _tiny_reg_dataset()
    with caplog.at_level("INFO", logger="stumpreg.stump"):
        StumpRegressor(verbose=1).fit(X, y)
    assert "best stump" in caplog.text


def test_regressor_get_params():
    regr = StumpRegressor(epsilon=0.1, optional=True)
    params = regr.get_params()
    assert params["epsilon"] == 0.1
    assert params["optional"] is True


def test_threshold_between_adjacent_floats():
    lo = np.nextafter(1.0, 2.0)
    hi = np.nextafter(lo, 2.0)
    X = np.array([[lo], [hi]])
    y = np.array([0.0, 10.0])
    regr = StumpRegressor().fit(X, y)
    assert lo <= regr.threshold_ < hi
    assert regr.score_ == pytest.approx(0.0)
    assert np.allclose(regr.predict(X), y)


def test_threshold_for_huge_values_is_finite():
    X = np.array([[1e308], [1.7e308]])
    y = np.array([0.0, 10.0])
    regr = StumpRegressor().fit(X, y)
    assert np.isfinite(regr.threshold_)
    assert 1e308 <= regr.threshold_ < 1.7e308
    assert np.allclose(regr.predict(X), y)


def test_sweep_with_zero_weight_tail(monkeypatch):
    from stumpreg import WeightAccumulator
    clipped = []
    original_clip = WeightAccumulator.clip

    def recording_clip(self, bucket):
        clipped.append(int(bucket))
        original_clip(self, bucket)

    monkeypatch.setattr(WeightAccumulator, "clip", recording_clip)
    x = np.array([1.0, 2.0, 3.0, 4.0])
    y = np.array([0.1, 0.7, 5.0, 7.0])
    split = sweep_feature(x, y, np.array([0.5, 1.0, 0.0, 0.0]))
    # FALSE only holds zero-weight examples once x=2 moves to TRUE
    assert clipped and set(clipped) == {int(Bucket.FALSE)}
    assert split.score >= 0.0
    assert split.score == pytest.approx(0.0)
    assert split.threshold == pytest.approx(1.5)
    assert np.allclose(split.values[:2], [0.1, 0.7])


def test_apply_checks_feature_count():
    X, y = _tiny_reg_dataset()
    regr = StumpRegressor().fit(X, y)
    with pytest.raises(ValueError):
        regr.apply([[1.0]])
    with pytest.raises(ValueError):
        regr.predict_rule([[1.0]])
