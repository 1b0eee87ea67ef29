"""Shared fixtures for core unit tests"""

import pytest
from markdown_it import MarkdownIt

from chatsaver.core.tree import parse_html


SAMPLE_HTML = """\
<div class="markdown prose">
  <h2>Setup</h2>
  <p>Install the package with <code>pip</code>, then run it.</p>
  <ul>
    <li>first step</li>
    <li>second step
      <ol>
        <li>sub one</li>
        <li>sub two</li>
      </ol>
    </li>
  </ul>
  <pre><code class="language-python">print("hello")
</code></pre>
  <p>See <a href="https://example.com/docs">the docs</a>.</p>
</div>
"""


@pytest.fixture(name="md_parser")
def md_parser_fixture():
    """CommonMark parser used as an independent reading of extracted markdown."""
    return MarkdownIt("commonmark")


@pytest.fixture(name="sample_html")
def sample_html_fixture():
    return SAMPLE_HTML


@pytest.fixture(name="sample_tree")
def sample_tree_fixture():
    return parse_html(SAMPLE_HTML)
