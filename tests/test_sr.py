import importlib

import numpy as np
import pytest
from numpy.random import default_rng

from varsign.var import sr, var_hd, var_ir, var_vd
from varsign.var.sr import closest_to_median

sr_module = importlib.import_module('varsign.var.sr')

SIGN = np.array([[1], [-1]])


@pytest.fixture
def sr_out(var_results, options):
    return sr(var_results, SIGN, options, rng=default_rng(0))


def test_scenario_two_variables_one_shock(var_results, options) -> None:
    out = sr(var_results, SIGN, dict(options, ndraws=3), rng=default_rng(1))

    assert out.Ball.shape == (2, 2, 3)
    assert out.ndraws == 3
    assert np.all(out.IRall[0, 0, 0, :] >= 0)
    assert np.all(out.IRall[0, 1, 0, :] <= 0)


def test_output_shapes(sr_out, var_results) -> None:
    T = var_results['nobs'] + var_results['nlag']

    assert sr_out.IRall.shape == (6, 2, 2, 5)
    assert sr_out.VDall.shape == (6, 2, 2, 5)
    assert sr_out.IRmed.shape == sr_out.IRinf.shape == sr_out.IRsup.shape == (6, 2, 2)
    assert sr_out.VDmed.shape == sr_out.VDinf.shape == sr_out.VDsup.shape == (6, 2, 2)
    assert sr_out.HDall.shock.shape == (T, 2, 2, 5)
    assert sr_out.HDall.init.shape == (T, 2, 5)
    assert sr_out.HD.endo.shape == (T, 2)
    assert not np.isnan(sr_out.IRall).any()
    assert not np.isnan(sr_out.Ball).any()


def test_median_and_closest_draw(sr_out) -> None:
    Bmed = np.median(sr_out.Ball, axis=2)
    dist = np.sum((sr_out.Ball - Bmed[:, :, None])**2, axis=(0, 1))

    np.testing.assert_array_equal(sr_out.Bmed, Bmed)
    assert sr_out.sel == int(np.argmin(dist))
    np.testing.assert_array_equal(sr_out.B, sr_out.Ball[:, :, sr_out.sel])


def test_closest_to_median_ties_go_to_first_draw() -> None:
    Ball = np.stack([np.zeros((2, 2)), np.full((2, 2), 2.0)], axis=2)

    Bmed, sel = closest_to_median(Ball)

    np.testing.assert_array_equal(Bmed, np.ones((2, 2)))
    assert sel == 0

    Ball = np.stack([np.full((2, 2), v) for v in (0.0, 1.0, 1.0, 2.0)], axis=2)
    assert closest_to_median(Ball)[1] == 1


def test_bands_are_pointwise_percentiles(sr_out, options) -> None:
    lo = (100 - options['pctg']) / 2
    hi = 100 - (100 - options['pctg']) / 2

    np.testing.assert_array_equal(sr_out.IRmed, np.median(sr_out.IRall, axis=3))
    np.testing.assert_array_equal(sr_out.VDmed, np.median(sr_out.VDall, axis=3))
    np.testing.assert_allclose(sr_out.IRinf, np.percentile(sr_out.IRall, lo, axis=3, method='hazen'))
    np.testing.assert_allclose(sr_out.IRsup, np.percentile(sr_out.IRall, hi, axis=3, method='hazen'))
    np.testing.assert_allclose(sr_out.VDinf, np.percentile(sr_out.VDall, lo, axis=3, method='hazen'))
    np.testing.assert_allclose(sr_out.VDsup, np.percentile(sr_out.VDall, hi, axis=3, method='hazen'))
    assert np.all(sr_out.IRinf <= sr_out.IRmed)
    assert np.all(sr_out.IRmed <= sr_out.IRsup)


def test_selected_draw_outputs_match_collaborators(sr_out, var_results, options) -> None:
    var_sel = dict(var_results, B=sr_out.B)
    opts = dict(options, ident='sign')

    IR, _ = var_ir(var_sel, opts)
    np.testing.assert_array_equal(sr_out.IR, IR)
    np.testing.assert_array_equal(sr_out.VD, var_vd(var_sel, opts))
    hd = var_hd(var_sel, opts)
    np.testing.assert_array_equal(sr_out.HD.shock, hd.shock)
    np.testing.assert_array_equal(sr_out.HD.endo, hd.endo)
    np.testing.assert_array_equal(sr_out.IRall[..., sr_out.sel], sr_out.IR)


def test_selected_draw_outputs_use_its_own_posterior_draw(exog_model, options) -> None:
    var_results = exog_model.results
    out = sr(var_results, SIGN, dict(options, sr_mod=1), rng=default_rng(12))

    np.testing.assert_array_equal(out.IR, out.IRall[..., out.sel])
    np.testing.assert_array_equal(out.VD, out.VDall[..., out.sel])
    for name in ('shock', 'init', 'const', 'trend', 'trend2', 'endo', 'exo'):
        np.testing.assert_array_equal(getattr(out.HD, name), getattr(out.HDall, name)[..., out.sel])
    # the estimated coefficients with the same B give different dynamics
    IR_point, _ = var_ir(dict(var_results, B=out.B), dict(options, ident='sign'))
    np.testing.assert_allclose(IR_point[0], out.IR[0])
    assert not np.allclose(IR_point[1:], out.IR[1:])


def test_rotations_preserve_covariance_without_model_uncertainty(sr_out, var_results) -> None:
    for jj in range(sr_out.ndraws):
        B = sr_out.Ball[:, :, jj]
        np.testing.assert_allclose(B @ B.T, var_results['sigma'], atol=1e-12)


def test_model_uncertainty(var_results, options) -> None:
    out = sr(var_results, SIGN, dict(options, sr_mod=1), rng=default_rng(2))

    assert np.all(out.IRall[0, 0, 0, :] > 0)
    assert np.all(out.IRall[0, 1, 0, :] < 0)
    np.testing.assert_allclose(out.VDall.sum(axis=2), 100.0)
    # each draw carries its own covariance, so the impact matrices differ from sigma
    BBt = np.einsum('ijd,kjd->ikd', out.Ball, out.Ball)
    assert not np.allclose(BBt[..., 0], var_results['sigma'])
    # the historical decomposition still adds up to the data for every draw
    nlag = var_results['nlag']
    for jj in range(out.ndraws):
        np.testing.assert_allclose(out.HDall.endo[nlag:, :, jj], var_results['Y'], atol=1e-8)


def test_exogenous_component_stays_zero_without_exogenous(sr_out) -> None:
    assert sr_out.HDall.exo.shape[2] == 0
    assert not np.any(sr_out.HDall.exo)


def test_exogenous_component_is_filled(exog_model, options) -> None:
    out = sr(exog_model.results, SIGN, dict(options, ndraws=2), rng=default_rng(3))

    nlag = exog_model.nlag
    assert out.HDall.exo.shape[2:] == (1, 2)
    assert np.any(out.HDall.exo[nlag:] != 0)


def test_progress_output(var_results, options, capsys) -> None:
    sr(var_results, SIGN, options, rng=default_rng(4))

    out = capsys.readouterr().out
    assert 'Rotation: 2 / 5' in out
    assert 'Rotation: 4 / 5' in out
    assert 'Rotation: 5 / 5' not in out
    assert '-- Done!' in out


def test_same_seed_reproduces_results(var_results, options) -> None:
    opts = dict(options, sr_mod=1)
    first = sr(var_results, SIGN, opts, rng=default_rng(7))
    second = sr(var_results, SIGN, opts, rng=default_rng(7))

    np.testing.assert_array_equal(first.Ball, second.Ball)
    np.testing.assert_array_equal(first.IRall, second.IRall)
    np.testing.assert_array_equal(first.VDsup, second.VDsup)
    np.testing.assert_array_equal(first.HDall.shock, second.HDall.shock)
    assert first.sel == second.sel


def test_inputs_are_not_mutated(var_results, options) -> None:
    sigma = var_results['sigma'].copy()

    sr(var_results, SIGN, options, rng=default_rng(8))

    assert var_results['B'] is None
    assert options['ident'] == 'short'
    np.testing.assert_array_equal(var_results['sigma'], sigma)


@pytest.mark.parametrize("sign, overrides, match", [
    (None, {}, 'sign restrictions'),
    (SIGN, {'ndraws': 0}, 'ndraws'),
    (SIGN, {'ndraws': 2.5}, 'ndraws'),
    (SIGN, {'pctg': 100}, 'pctg'),
    (SIGN, {'pctg': 0}, 'pctg'),
    (SIGN, {'mult': 0}, 'mult'),
    (SIGN, {'nsteps': 0}, 'nsteps'),
    (SIGN, {'nsteps': 2.0}, 'nsteps'),
    (SIGN, {'sr_hor': 0}, 'sr_hor'),
    (SIGN, {'sr_rot': -1}, 'sr_rot'),
    (SIGN, {'pctg': 'wide'}, 'pctg'),
    (np.array([[1], [3]]), {}, 'must be -1, 0 or 1'),
])
def test_invalid_inputs_fail_fast(var_results, options, monkeypatch, sign, overrides, match) -> None:
    calls = []
    monkeypatch.setattr(sr_module, 'sign_restrictions', lambda *args, **kwargs: calls.append(args))

    with pytest.raises(ValueError, match=match):
        sr(var_results, sign, dict(options, **overrides))
    assert calls == []


def test_missing_options_raise(var_results) -> None:
    with pytest.raises(ValueError, match='VAR options'):
        sr(var_results, SIGN, None)


@pytest.mark.parametrize("key", ['nsteps', 'ndraws', 'pctg', 'mult', 'sr_hor', 'sr_rot', 'sr_mod'])
def test_missing_option_key_is_named(var_results, options, monkeypatch, key) -> None:
    calls = []
    monkeypatch.setattr(sr_module, 'sign_restrictions', lambda *args, **kwargs: calls.append(args))
    opts = {k: v for k, v in options.items() if k != key}

    with pytest.raises(ValueError, match=f'missing {key}'):
        sr(var_results, SIGN, opts)
    assert calls == []


def test_rotation_search_failure_propagates(var_results, options, monkeypatch) -> None:
    def failing_search(*args, **kwargs):
        raise RuntimeError('Could not find a rotation satisfying the sign restrictions')

    monkeypatch.setattr(sr_module, 'sign_restrictions', failing_search)

    with pytest.raises(RuntimeError, match='Could not find a rotation'):
        sr(var_results, SIGN, options, rng=default_rng(9))
