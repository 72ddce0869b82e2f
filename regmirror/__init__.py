"""
regmirror - versioned mirror of a component registry built from git history.

Each relevant upstream commit yields a manifest of components; files whose
content changed are folded into a persistent mirror that keeps every prior
version with commit attribution.

Usage:
    from regmirror.mirror import merge_registry

    result = merge_registry(
        manifest_components,
        component_source_root="./repo/apps/www/registry/default",
        output_root="./fake-registry",
        commit_id="abc123",
        commit_timestamp="2024-01-01T00:00:00+00:00",
    )
    print(result.summary)
"""

__version__ = "0.1.0"
