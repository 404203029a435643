"""
Shared fixtures for goplssetting tests
"""
import copy
import json
import shutil

import pytest

from goplssetting.api import parse_api

SAMPLE_API = {
    "Options": {
        "User": [
            {
                "Name": "buildFlags",
                "Type": "[]string",
                "Doc": "buildFlags is the set of flags passed on to the build system.\n",
                "Default": "[]",
                "Hierarchy": "build",
            },
            {
                "Name": "directoryFilters",
                "Type": "[]string",
                "Doc": "directoryFilters can be used to exclude unwanted directories.\n",
                "Default": "[\"-**/node_modules\"]",
                "Hierarchy": "build",
            },
            {
                "Name": "codelenses",
                "Type": "map[enum]bool",
                "Doc": "codelenses overrides the enabled/disabled state of code lenses.\n",
                "EnumKeys": {
                    "ValueType": "bool",
                    "Keys": [
                        {"Name": "\"generate\"", "Doc": "Run `go generate`", "Default": "true"},
                        {"Name": "\"test\"", "Doc": "Run tests", "Default": "false"},
                    ],
                },
                "Default": "{\"generate\":true,\"test\":false}",
                "Hierarchy": "ui",
            },
            {
                "Name": "hints",
                "Type": "map[enum]bool",
                "Doc": "hints specify inlay hints that users want to see.\n",
                "EnumKeys": {
                    "ValueType": "bool",
                    "Keys": [
                        {"Name": "\"assignVariableTypes\"", "Doc": "Enable variable type hints.", "Default": "false"},
                        {"Name": "\"parameterNames\"", "Doc": "Enable parameter name hints.", "Default": "false"},
                    ],
                },
                "Default": "{}",
                "Status": "experimental",
                "Hierarchy": "ui.inlayhint",
            },
            {
                "Name": "vulncheck",
                "Type": "enum",
                "Doc": "vulncheck enables vulnerability scanning.\n",
                "EnumValues": [
                    {"Value": "\"Imports\"", "Doc": "`\"Imports\"`: scan imports."},
                    {"Value": "\"Off\"", "Doc": "`\"Off\"`: disable."},
                ],
                "Default": "\"Off\"",
                "Status": "experimental",
                "Hierarchy": "ui.diagnostic",
            },
            {
                "Name": "staticcheck",
                "Type": "bool",
                "Doc": "staticcheck enables additional analyses.\n",
                "Default": "false",
                "Status": "experimental",
                "Hierarchy": "ui.diagnostic",
            },
            {
                "Name": "verboseOutput",
                "Type": "bool",
                "Doc": "verboseOutput enables additional debug logging.\n",
                "Default": "false",
                "Status": "debug",
            },
            {
                "Name": "linksInHover",
                "Type": "enum",
                "Doc": "linksInHover controls the presence of documentation links in hover markdown.\n",
                "EnumValues": [
                    {"Value": "false", "Doc": "`false`: do not show links"},
                    {"Value": "true", "Doc": "`true`: show links"},
                    {"Value": "\"gopls\"", "Doc": "`\"gopls\"`: show links via gopls"},
                ],
                "Default": "true",
                "Hierarchy": "ui.documentation",
            },
            {
                "Name": "expandWorkspaceToModule",
                "Type": "bool",
                "Doc": "expandWorkspaceToModule determines which packages are considered workspace packages.\n",
                "Default": "true",
                "Status": "experimental",
                "Hierarchy": "build",
                "DeprecationMessage": "This setting is deprecated.",
            },
        ]
    },
    "Lenses": [
        {"FileType": "Go", "Lens": "generate", "Title": "Run `go generate`", "Doc": "", "Default": True},
    ],
    "Analyzers": [
        {"Name": "unusedparams", "Doc": "check for unused parameters", "URL": "", "Default": True},
    ],
    "Hints": [
        {"Name": "assignVariableTypes", "Doc": "Enable variable type hints.", "Default": False},
    ],
}

SAMPLE_MANIFEST = {
    "name": "go",
    "version": "0.0.0-test",
    "contributes": {
        "commands": [
            {"command": "go.test.cursor", "title": "Go: Test Function At Cursor", "description": "Runs a unit test at the cursor."},
        ],
        "configuration": {
            "properties": {
                "go.buildTags": {
                    "type": "string",
                    "default": "",
                    "description": "The Go build tags to use for all commands.",
                },
                "gopls": {"type": "object", "markdownDescription": "stale"},
                "gopls.removedSetting": {"type": "boolean"},
            }
        },
    },
}


@pytest.fixture
def api_data():
    return copy.deepcopy(SAMPLE_API)


@pytest.fixture
def api(api_data):
    return parse_api(api_data)


@pytest.fixture
def manifest(tmp_path):
    path = tmp_path / "package.json"
    path.write_text(json.dumps(SAMPLE_MANIFEST, indent=2) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def api_file(tmp_path, api_data):
    path = tmp_path / "api.json"
    path.write_text(json.dumps(api_data), encoding="utf-8")
    return path


requires_jq = pytest.mark.skipif(shutil.which("jq") is None, reason="jq is not found")
