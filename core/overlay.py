"""Navigation overlay injected at the top of rewritten documents."""

import html
import json

from core.config import RelaySettings

OVERLAY_ID = "uv-toolbar"

_STYLES = """
<style id="uv-toolbar-styles">
#uv-toolbar{position:fixed;left:8px;right:8px;top:8px;z-index:2147483647;
  display:flex;gap:8px;align-items:center;backdrop-filter:blur(6px);
  border-radius:12px;padding:8px 12px;border:1px solid rgba(255,255,255,0.06);
  background:linear-gradient(90deg,rgba(86,0,255,0.12),rgba(255,0,200,0.06));
  box-shadow:0 6px 24px rgba(48,16,96,0.45);font-family:Inter,Segoe UI,Roboto,Arial,sans-serif;}
#uv-toolbar input[type="text"]{flex:1;padding:8px 10px;border-radius:8px;border:0;background:rgba(0,0,0,0.35);color:#fff;}
#uv-toolbar button{padding:8px 10px;border-radius:8px;border:0;background:transparent;color:#fff;cursor:pointer}
#uv-toolbar .uv-brand{font-weight:700;margin-right:6px;color:#fff;letter-spacing:0.6px}
@media (max-width:640px){#uv-toolbar{flex-direction:column;gap:6px;align-items:stretch}}
</style>
"""

_MARKUP = """
<div id="uv-toolbar" aria-hidden="false">
  <div class="uv-brand">ULTRAVIOLET</div>
  <form id="uv-nav" style="display:flex;gap:8px;flex:1">
    <input id="uv-url" type="text" value="{value}" />
    <button id="uv-go" type="submit">Go</button>
  </form>
  <button id="uv-theme" type="button">Theme</button>
  <button id="uv-close" type="button">Hide</button>
</div>
<div id="uv-toolbar-spacer" style="height:64px"></div>
"""

# Encoding must stay in step with core.codec.encode_target: base64 of UTF-8.
_SCRIPT = """
<script id="uv-toolbar-script">
(function(){
  var BASE_PATH = %(base_path)s;
  var PARAM = %(param)s;
  function encodeTarget(url) {
    var bytes = new TextEncoder().encode(url);
    var bin = '';
    for (var i = 0; i < bytes.length; i++) { bin += String.fromCharCode(bytes[i]); }
    return btoa(bin);
  }
  var toolbar = document.getElementById('uv-toolbar');
  var input = document.getElementById('uv-url');
  document.getElementById('uv-nav').addEventListener('submit', function(e){
    e.preventDefault();
    try {
      var url = new URL(input.value).toString();
      window.location.href = BASE_PATH + '?' + PARAM + '=' + encodeURIComponent(encodeTarget(url));
    } catch (err) { alert('Please enter a full URL (including https://)'); }
  });
  document.getElementById('uv-close').addEventListener('click', function(){
    toolbar.style.display = 'none';
    document.getElementById('uv-toolbar-spacer').style.display = 'none';
  });
  document.getElementById('uv-theme').addEventListener('click', function(){
    var root = document.documentElement;
    root.style.filter = root.style.filter ? '' : 'invert(1) hue-rotate(180deg)';
  });
  toolbar.addEventListener('click', function(e){ e.stopPropagation(); });
})();
</script>
"""


def render_overlay(current_url: str, settings: RelaySettings) -> str:
    """Render the overlay fragment for a page fetched from ``current_url``."""
    markup = _MARKUP.replace("{value}", html.escape(current_url, quote=True))
    script = _SCRIPT % {
        "base_path": _js_string(settings.base_path),
        "param": _js_string(settings.target_param),
    }
    return _STYLES + markup + script


def _js_string(value: str) -> str:
    # json.dumps leaves "</" intact, which would close the script element early
    return json.dumps(value).replace("</", "<\\/")
