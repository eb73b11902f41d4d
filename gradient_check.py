import numpy as np


def check_gradients(
    network,
    X,
    Y,
    epsilon=1e-6,
    max_rel_error=1e-3,
    min_abs_error=1e-8,
    mask=None,
    print_results=False,
):
    """
    Compares the analytic gradient of `network` with central finite differences,
    one parameter at a time.

    A parameter passes if its relative error |a - n| / (|a| + |n|) is at most
    `max_rel_error`, or if the absolute error |a - n| is at most `min_abs_error`
    (both gradients near zero). Needs float64 parameters and inputs; with
    float32 the finite differences are mostly rounding noise.

    Returns True when every parameter passes. Parameters are restored afterwards.
    """
    params = network.params()
    X = np.asarray(X)
    if params.dtype != np.float64 or X.dtype != np.float64:
        raise ValueError("Gradient checks require float64 parameters and inputs.")

    _, analytic = network.compute_gradient_and_score(X, Y, mask)

    failures = 0
    max_error_seen = 0.0
    for i in range(params.size):
        original = params[i]

        params[i] = original + epsilon
        score_plus = network.score(X, Y, mask)
        params[i] = original - epsilon
        score_minus = network.score(X, Y, mask)
        params[i] = original

        numerical = (score_plus - score_minus) / (2 * epsilon)
        abs_error = abs(analytic[i] - numerical)
        denominator = abs(analytic[i]) + abs(numerical)
        rel_error = abs_error / denominator if denominator > 0 else 0.0
        max_error_seen = max(max_error_seen, rel_error)

        if rel_error > max_rel_error and abs_error > min_abs_error:
            failures += 1
            if print_results:
                print(
                    f"❌ Param {i}: analytic={analytic[i]:.6e}, numerical={numerical:.6e}, rel error={rel_error:.3e}"
                )

    if print_results:
        status = "✅ Gradient check passed" if failures == 0 else "❌ Gradient check failed"
        print(
            f"{status}: {params.size - failures}/{params.size} params OK, max rel error {max_error_seen:.3e}"
        )

    return failures == 0
