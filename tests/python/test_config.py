"""
Tests for the configuration manager.
"""

import threading

import pytest
import numpy as np

import csmat
from csmat import CheckConfig, StorageConfig, CsmatConfig
from csmat.sparse import CsMat, CSR, ErrorKind, SparseError


class TestConfigDefaults:
    """Test default configuration."""

    def test_defaults(self, clean_config, monkeypatch):
        monkeypatch.delenv('CSMAT_NO_CHECKS', raising=False)
        cfg = CsmatConfig()
        assert cfg.index_dtype == 'int64'
        assert cfg.value_dtype == 'float64'
        assert cfg.check.check_structure
        assert cfg.check.check_lines

    def test_env_disables_checks(self, monkeypatch):
        monkeypatch.setenv('CSMAT_NO_CHECKS', '1')
        cfg = CsmatConfig()
        assert not cfg.check.check_structure
        assert not cfg.check.check_lines

    def test_to_dict(self, clean_config):
        d = csmat.config.to_dict()
        assert d['storage']['index_dtype'] == 'int64'
        assert set(d['check']) == {'check_structure', 'check_lines'}
        assert 'CsmatConfig' in repr(csmat.config)

    def test_get_config(self):
        assert csmat.get_config() is csmat.config


class TestConfigOverrides:
    """Test global and local overrides."""

    def test_global_value_dtype(self, clean_config):
        csmat.config.storage = StorageConfig(value_dtype='float32')
        assert CsMat.empty(CSR, 3).dtype == np.float32
        csmat.config.reset()
        assert CsMat.empty(CSR, 3).dtype == np.float64

    def test_local_index_dtype(self, clean_config):
        with csmat.config.local(storage=StorageConfig(index_dtype='int32')):
            mat = CsMat.eye(3)
            assert mat.indices.dtype == np.int32
        assert CsMat.eye(3).indices.dtype == np.int64

    def test_local_restored_on_error(self, clean_config):
        with pytest.raises(RuntimeError):
            with csmat.config.local(check=CheckConfig(check_lines=False)):
                raise RuntimeError("boom")
        assert csmat.config.check.check_lines

    def test_line_checks_disabled(self, clean_config):
        mat = CsMat.empty(CSR, 3)
        with csmat.config.local(check=CheckConfig(check_lines=False)):
            mat.append_outer([(2, 1.0), (0, 1.0)])
        assert mat.nnz == 2
        with pytest.raises(SparseError) as exc_info:
            mat.append_outer([(2, 1.0), (0, 1.0)])
        assert exc_info.value.kind is ErrorKind.UNSORTED_INDICES

    def test_unknown_section(self):
        with pytest.raises(TypeError):
            csmat.config.local(threads=4)

    def test_local_is_thread_local(self, clean_config):
        seen = []

        def worker():
            seen.append(csmat.config.value_dtype)

        with csmat.config.local(storage=StorageConfig(value_dtype='float32')):
            assert csmat.config.value_dtype == 'float32'
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join()
        assert seen == ['float64']
