"""Tests for data download, loading and splitting."""

import numpy as np
import pandas as pd
import pytest
import requests
from unittest.mock import MagicMock, patch

from har_classifier.data import DataLoader, DataSplitter, download_file
from har_classifier.exceptions import DataDownloadError, DataValidationError


def _mock_response(chunks, status_error=None):
    response = MagicMock()
    response.headers = {'content-length': str(sum(len(c) for c in chunks))}
    response.iter_content.return_value = iter(chunks)
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    ctx = MagicMock()
    ctx.__enter__.return_value = response
    ctx.__exit__.return_value = False
    return ctx


class TestDownloadFile:
    """Test download_file function."""

    def test_download_writes_file(self, tmp_path):
        """Test streamed chunks end up in the destination file."""
        dest = tmp_path / 'raw' / 'file.csv'
        with patch('har_classifier.data.download.requests.get',
                   return_value=_mock_response([b'a,b\n', b'1,2\n'])) as mock_get:
            path = download_file('https://example.org/file.csv', dest, timeout=5)

        assert path == dest
        assert dest.read_bytes() == b'a,b\n1,2\n'
        assert not (tmp_path / 'raw' / 'file.csv.part').exists()
        mock_get.assert_called_once_with('https://example.org/file.csv', stream=True, timeout=5)

    def test_existing_file_is_reused(self, tmp_path):
        """Test no request is made when the file already exists."""
        dest = tmp_path / 'file.csv'
        dest.write_text('cached')

        with patch('har_classifier.data.download.requests.get') as mock_get:
            download_file('https://example.org/file.csv', dest)

        mock_get.assert_not_called()
        assert dest.read_text() == 'cached'

    def test_force_redownloads(self, tmp_path):
        """Test force=True replaces an existing file."""
        dest = tmp_path / 'file.csv'
        dest.write_text('old')

        with patch('har_classifier.data.download.requests.get',
                   return_value=_mock_response([b'new'])):
            download_file('https://example.org/file.csv', dest, force=True)

        assert dest.read_text() == 'new'

    def test_http_error_raises(self, tmp_path):
        """Test HTTP errors become DataDownloadError without leftovers."""
        dest = tmp_path / 'file.csv'
        error = requests.HTTPError('404 Not Found')

        with patch('har_classifier.data.download.requests.get',
                   return_value=_mock_response([], status_error=error)):
            with pytest.raises(DataDownloadError, match='404'):
                download_file('https://example.org/file.csv', dest)

        assert not dest.exists()
        assert not (tmp_path / 'file.csv.part').exists()


class TestDataLoader:
    """Test DataLoader class."""

    def test_load_training(self, test_config, raw_files, har_frame):
        """Test training file loads without the unnamed index column."""
        loader = DataLoader(test_config)
        df = loader.load_training()

        assert 'Unnamed: 0' not in df.columns
        assert list(df.columns) == list(har_frame.columns)
        assert len(df) == len(har_frame)

    def test_na_tokens_are_missing(self, test_config, raw_files):
        """Test '#DIV/0!' and empty cells are read as NaN."""
        df = DataLoader(test_config).load_training()

        assert pd.api.types.is_float_dtype(df['kurtosis_roll_belt'])
        assert df['kurtosis_roll_belt'].notna().sum() == 4

    def test_load_validation(self, test_config, raw_files):
        """Test the validation file loads with its id column."""
        df = DataLoader(test_config).load_validation()

        assert len(df) == 20
        assert df['problem_id'].tolist() == list(range(1, 21))
        assert 'classe' not in df.columns

    def test_missing_label_column(self, test_config, raw_files, har_frame):
        """Test a training file without label fails validation."""
        path = raw_files / test_config['data']['training_file']
        har_frame.drop(columns=['classe']).to_csv(path)

        with pytest.raises(DataValidationError, match='classe'):
            DataLoader(test_config).load_training()

    def test_missing_label_values(self, test_config, raw_files, har_frame):
        """Test missing labels fail validation."""
        path = raw_files / test_config['data']['training_file']
        har_frame.loc[0, 'classe'] = np.nan
        har_frame.to_csv(path)

        with pytest.raises(DataValidationError):
            DataLoader(test_config).load_training()

    def test_downloads_when_missing(self, test_config):
        """Test the loader downloads absent files."""
        loader = DataLoader(test_config)

        with patch('har_classifier.data.loader.download_file',
                   side_effect=DataDownloadError('offline')) as mock_download:
            with pytest.raises(DataDownloadError):
                loader.load_training()

        args, kwargs = mock_download.call_args
        assert args[0] == test_config['data']['training_url']
        assert kwargs['force'] is False

    def test_get_statistics(self, test_config, har_frame):
        """Test dataset statistics."""
        stats = DataLoader(test_config).get_statistics(har_frame)

        assert stats['n_samples'] == 300
        assert stats['n_classes'] == 5
        assert stats['class_distribution'] == {c: 60 for c in 'ABCDE'}
        assert stats['class_proportions']['A'] == 0.2
        assert stats['n_columns_mostly_missing'] == 2

    def test_print_summary(self, test_config, har_frame, capsys):
        """Test the summary mentions every class."""
        DataLoader(test_config).print_summary(har_frame)

        out = capsys.readouterr().out
        for cls in 'ABCDE':
            assert f"Clase {cls}: 60" in out


class TestDataSplitter:
    """Test DataSplitter class."""

    def test_split_ratio(self, har_frame):
        """Test the 75/25 split sizes."""
        splitter = DataSplitter(train_ratio=0.75, verbose=False)
        train_df, test_df = splitter.split_frame(har_frame, 'classe')

        assert len(train_df) == 225
        assert len(test_df) == 75
        assert set(train_df.index).isdisjoint(test_df.index)

    def test_split_is_stratified(self, har_frame):
        """Test class proportions are kept in both splits."""
        splitter = DataSplitter(train_ratio=0.75, verbose=False)
        train_df, test_df = splitter.split_frame(har_frame, 'classe')

        assert train_df['classe'].value_counts().tolist() == [45] * 5
        assert test_df['classe'].value_counts().tolist() == [15] * 5

    def test_split_is_reproducible(self, har_frame):
        """Test the same seed gives the same split."""
        a, _ = DataSplitter(random_state=7, verbose=False).split_frame(har_frame, 'classe')
        b, _ = DataSplitter(random_state=7, verbose=False).split_frame(har_frame, 'classe')

        assert a.index.equals(b.index)

    @pytest.mark.parametrize("ratio", [0, 1, 2])
    def test_invalid_ratio(self, ratio):
        """Test invalid ratios raise ValueError."""
        with pytest.raises(ValueError):
            DataSplitter(train_ratio=ratio)

    def test_from_config(self, test_config):
        """Test construction from configuration."""
        splitter = DataSplitter.from_config(test_config)

        assert splitter.train_ratio == 0.75
        assert splitter.random_state == 42

    def test_cv_folds(self):
        """Test stratified fold generator."""
        folds = DataSplitter(random_state=3).get_cv_folds(n_splits=4)

        assert folds.get_n_splits() == 4
        assert folds.shuffle is True
