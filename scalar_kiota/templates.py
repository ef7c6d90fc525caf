"""Templates for the browser side: the SDK loader script and the docs page."""
from typing import Any, Dict

import orjson
from jinja2 import Template

# Dynamically imports the bundled SDK and exposes a client as window.apiClient.
# Written once; users may edit the file afterwards.
CONFIG_TEMPLATE = """export default {
    async load() {
        try {
            const module = await import('./sdk.js');
            const createClient = module.createApiClient || module[{{ sdk_name_json }}] || module.default;
            if (typeof createClient === 'function') {
                const { FetchRequestAdapter } = await import('@microsoft/kiota-http-fetchlibrary');
                window.apiClient = createClient(new FetchRequestAdapter({ baseUrl: window.location.origin }));
                console.log('Scalar-Kiota: SDK loaded successfully');
                return {};
            }
            console.warn('Scalar-Kiota: No client factory found in SDK');
            return {};
        } catch (error) {
            console.error('Scalar-Kiota: SDK load failed:', error);
            return {};
        }
    }
};
"""

DOCS_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8" />
<meta name="viewport" content="width=device-width, initial-scale=1" />
<title>{{ title }}</title>
</head>
<body>
<div id="app"></div>
<script src="{{ cdn_url }}"></script>
<script type="module">
const configuration = {{ configuration_json | safe }};
let extra = {};
try {
    const loader = await import(configuration.javaScriptConfiguration);
    extra = (await loader.default.load()) || {};
} catch (error) {
    console.error('Scalar-Kiota: config.js failed to load:', error);
}
Scalar.createApiReference('#app', { ...configuration, ...extra });
</script>
</body>
</html>
"""

SCALAR_CDN_URL = "https://cdn.jsdelivr.net/npm/@scalar/api-reference"


def _json(value: Any) -> str:
    # Escape "</" so embedded strings cannot close the surrounding <script>.
    return orjson.dumps(value).decode("utf-8").replace("</", "<\\/")


def render_loader_config(sdk_name: str) -> str:
    return Template(CONFIG_TEMPLATE).render(sdk_name_json=_json(sdk_name))


def render_docs_page(title: str, theme: str, spec_url: str, config_url: str) -> str:
    configuration: Dict[str, Any] = {
        "title": title,
        "theme": theme,
        "url": spec_url,
        "javaScriptConfiguration": config_url,
    }
    return Template(DOCS_TEMPLATE, autoescape=True).render(
        title=title,
        cdn_url=SCALAR_CDN_URL,
        configuration_json=_json(configuration),
    )
