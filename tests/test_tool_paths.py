"""Tests for server.tool_paths module."""

from unittest.mock import patch

from server.tool_paths import (
    PROJECT_DIR,
    TOOL_MODULES_DIR,
    TOOLS_BASIC_FILE,
    TOOLS_CORE_FILE,
    get_module_dir,
    get_tools_file_path,
    get_tools_import_path,
    split_module_name,
)


class TestModuleConstants:
    def test_project_dir_is_absolute(self):
        assert PROJECT_DIR.is_absolute()

    def test_tool_modules_dir_is_child_of_project(self):
        assert TOOL_MODULES_DIR.parent == PROJECT_DIR
        assert TOOL_MODULES_DIR.name == "tool_modules"


class TestSplitModuleName:
    def test_basic_suffix(self):
        assert split_module_name("billcom_basic") == ("billcom", "tools_basic.py")

    def test_extra_suffix(self):
        assert split_module_name("billcom_extra") == ("billcom", "tools_extra.py")

    def test_nested_name_with_suffix(self):
        assert split_module_name("billcom_spend_basic") == ("billcom_spend", "tools_basic.py")

    def test_no_suffix_defaults_to_basic(self):
        assert split_module_name("billcom_spend") == ("billcom_spend", TOOLS_BASIC_FILE)

    def test_no_suffix_prefers_core_when_present(self, tmp_path):
        src = tmp_path / "aa_widget" / "src"
        src.mkdir(parents=True)
        (src / TOOLS_CORE_FILE).write_text("")
        with patch("server.tool_paths.TOOL_MODULES_DIR", tmp_path):
            assert split_module_name("widget") == ("widget", TOOLS_CORE_FILE)


class TestGetToolsFilePath:
    def test_basic(self):
        expected = TOOL_MODULES_DIR / "aa_billcom" / "src" / "tools_basic.py"
        assert get_tools_file_path("billcom_basic") == expected

    def test_spend(self):
        expected = TOOL_MODULES_DIR / "aa_billcom_spend" / "src" / "tools_basic.py"
        assert get_tools_file_path("billcom_spend_basic") == expected

    def test_real_files_exist(self):
        for name in ("billcom_basic", "billcom_extra", "billcom_spend_basic"):
            assert get_tools_file_path(name).exists(), name


class TestGetToolsImportPath:
    def test_import_paths(self):
        assert get_tools_import_path("billcom_basic") == "tool_modules.aa_billcom.src.tools_basic"
        assert get_tools_import_path("billcom_extra") == "tool_modules.aa_billcom.src.tools_extra"
        assert get_tools_import_path("billcom_spend_basic") == "tool_modules.aa_billcom_spend.src.tools_basic"


class TestGetModuleDir:
    def test_strips_suffix(self):
        assert get_module_dir("billcom_extra") == TOOL_MODULES_DIR / "aa_billcom"

    def test_no_suffix(self):
        assert get_module_dir("billcom_spend") == TOOL_MODULES_DIR / "aa_billcom_spend"
