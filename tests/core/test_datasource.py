"""
Tests for column lookup in data frames and mappings.
"""

import numpy as np
import pytest

from pynls.core.datasource import get_column, get_xy
from pynls.core.exceptions import ValidationError


class TestGetColumn:

    def test_array_passthrough(self):
        x = np.arange(3.0)
        assert get_column(None, x, 'x') is x

    def test_dict_lookup(self):
        data = {'time': [1.0, 2.0]}
        assert get_column(data, 'time', 'x') == [1.0, 2.0]

    def test_name_without_data(self):
        with pytest.raises(ValidationError, match="no data= was supplied"):
            get_column(None, 'time', 'x')

    def test_missing_column_lists_available(self):
        with pytest.raises(ValidationError, match="Available: conc, time"):
            get_column({'time': [1], 'conc': [2]}, 'dose', 'x')

    def test_pandas_series_to_numpy(self):
        pd = pytest.importorskip('pandas')
        df = pd.DataFrame({'time': [0.0, 1.0, 2.0]})
        column = get_column(df, 'time', 'x')
        assert isinstance(column, np.ndarray)
        np.testing.assert_array_equal(column, [0.0, 1.0, 2.0])

    def test_pandas_missing_column(self):
        pd = pytest.importorskip('pandas')
        df = pd.DataFrame({'time': [0.0]})
        with pytest.raises(ValidationError, match="'dose' not found"):
            get_column(df, 'dose', 'y')

    def test_torch_tensor_to_numpy(self):
        torch = pytest.importorskip('torch')
        column = get_column(None, torch.tensor([1.0, 2.0]), 'x')
        assert isinstance(column, np.ndarray)


class TestGetXY:

    def test_mixed(self):
        x, y = get_xy({'conc': [3.0, 4.0]}, [1.0, 2.0], 'conc')
        assert x == [1.0, 2.0]
        assert y == [3.0, 4.0]
