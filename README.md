# samknn

An online k-nearest-neighbour classifier with self-adjusting memory (SAM-kNN)
for labelled data streams whose distribution drifts over time.

Every sample is first predicted and then learned. The model keeps a
short-term memory (STM) of recent samples and a long-term memory (LTM) of
older knowledge, and answers with the STM vote, the LTM vote or the vote of
both combined, whichever has been strictly most accurate so far (the
combined vote otherwise). The STM size is tuned as the stream goes on:
candidate sizes (the current size and its halvings, down to a minimum) are
scored, and when a shorter window scores better, the oldest STM samples are
cleaned against the kept ones and moved to the LTM. When the two memories
would collide, the LTM is halved per class with k-means.

The model works on fixed-point unsigned integer features and integer class
labels.

## Installation

```
pip install .
```

## Library use

```python
from samknn.config import Config
from samknn.model import SAMkNN

model = SAMkNN(Config())
for point, label in stream:
    prediction = model.predict_train(point, label)
```

- `SAMkNN.predict_train(datapoint, ref_label)` returns the prediction for
  one sample, then learns it. It raises `ValueError` if the datapoint has
  the wrong number of dimensions or the label is outside `0 .. n_classes - 1`.
  Feature values are cut to `datapoint_bits` bits.
- `SAMkNN.run(data, labels)` resets the model, then predicts and learns
  every sample in turn and returns the list of predictions. Values and
  labels are cut to their configured bit widths first. `data` and `labels`
  must have the same length.
- `SAMkNN.reset()` empties the memories and forgets all history.

### Configuration

`samknn.config.Config` is a frozen dataclass. Its fields and defaults:

| field                    | default |
|--------------------------|---------|
| `datapoint_bits`         | 8       |
| `n_datapoint_dimensions` | 2       |
| `n_classes`              | 4       |
| `k_neighbors`            | 5       |
| `mem_size`               | 5000    |
| `min_stm_size`           | 50      |
| `max_ltm_size`           | 2000    |
| `n_parallel_runs`        | 1       |
| `max_acc_approx`         | `True`  |

All numeric fields must be positive, and `max_ltm_size` and `min_stm_size`
must not exceed `mem_size`. Otherwise `ValueError` is raised.
`max_acc_approx` lets a candidate's score be updated incrementally when its
window has moved by one sample, instead of being recomputed.
`n_parallel_runs` splits each neighbour search into interleaved runs whose
results are merged. Derived values are available as `max_candidate_sizes()`,
`dist_bits()`, `max_dist()`, `label_bits()` and `max_datapoint_value()`.
`samknn.config.calculate_bits(n)` gives the smallest bit count `b` with
`2 ** b >= n`.

### Building blocks

- `samknn.neighbors`: `best_class`, `squared_distance`, `farthest_correct`,
  `KBestCollector`, `combine_runs` and `merge_k_best`.
- `samknn.memory.Memory`: the shared STM/LTM store, with `append_stm`,
  `invalidate`, `clean`, `stm_to_ltm`, `cluster_down` and `entry`.
- `samknn.knunit.KNUnit`: neighbour search over memory address ranges, with
  `run`, `predict_correct` and `clean`.
- `samknn.histories.PredictionHistories`: sliding scores of the three votes,
  with `get_output` and `get_label`.
- `samknn.sizing`: `generate_candidate_sizes`, `get_optimal_size` and
  `PerformanceCounter`.

## Command line

```
samknn IN_DIR OUT_DIR N_BITS
```

`IN_DIR` must contain:

- `.DIMS`: the number of dimensions per sample
- `.SAMPLES`: the number of samples
- `data`: whitespace-separated feature values, normally in `[0, 1)`. Each
  value is scaled by `2**N_BITS` and truncated to an integer.
- `labels`: one integer class label per sample

The model uses the default configuration, except that `datapoint_bits` is
`N_BITS` and the number of dimensions is taken from the data. The command
writes two files to `OUT_DIR`: `predictions`, with one prediction per line,
and `runtime`, with the classification time in milliseconds. With a wrong
number of arguments it prints the usage line. If a file cannot be read or
written, or the input is malformed, it prints the error to standard error.
In both cases it exits with a non-zero status.

## What this package does not do

The classifier runs in the calling Python process over data held in memory.
It does not read from live streams, offload work to other devices or
processes, or save a trained model to disk. The reported runtime is the
time of the software classification.