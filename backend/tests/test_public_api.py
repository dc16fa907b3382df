"""The top-level package exposes the core operations."""

import designkit


class TestPublicApi:
    def test_core_operations_exported(self):
        for name in (
            "extract_node_properties",
            "normalize_token_name",
            "match_variables_to_tokens",
            "match_references_to_tokens",
            "compile_global_bundle",
            "compile_component_bundle",
        ):
            assert callable(getattr(designkit, name))
            assert name in designkit.__all__

    def test_end_to_end(self):
        tokens = [{"name": "Color/Primary/500", "value": "#3366ff", "type": "color"}]
        [match] = designkit.match_variables_to_tokens(
            [{"id": "v1", "name": "color/primary/500"}], tokens,
        )
        assert match.is_exact
        bundle = designkit.compile_global_bundle(tokens)
        assert match.css_var.replace("var(", "").rstrip(")") + ": #3366ff;" in bundle.css_content
