"""
Shared fixtures: saved results pages and fake collaborators
"""

import pytest

from sitescrape_core.fetcher import FetchResult


SCHOLAR_URL = "https://scholar.google.com/scholar?hl=en&q=iot"

SCHOLAR_HTML = """<html>
<head><title>iot - Google Scholar</title></head>
<body>
<h1>Google Scholar</h1>
<div id="gs_res_ccl_mid">
  <div class="gs_r gs_or gs_scl" data-cid="a1">
    <h3 class="gs_rt"><a href="https://example.org/paper1">Internet of Things: A survey</a></h3>
    <div class="gs_a"><a href="/citations?user=abc">J Smith</a>, A Lee - Journal of IoT, 2020 - springer.com</div>
    <div class="gs_rs">A survey of the Internet of Things.</div>
    <div class="gs_fl gs_flb"><a href="#">Save</a><a href="/scholar?cites=1">Cited by 42</a></div>
  </div>
  <div class="gs_r gs_or gs_scl" data-cid="a2">
    <h3 class="gs_rt">[CITATION] Security in IoT networks</h3>
    <div class="gs_a">M García, P Chen, R Kumar… - IEEE Access, 2019</div>
    <div class="gs_fl gs_flb"><a href="/scholar?related">Related articles</a></div>
  </div>
  <div class="gs_r gs_or gs_scl" data-cid="a3">
    <h3 class="gs_rt"></h3>
    <div class="gs_a">Nobody - 2001</div>
  </div>
</div>
</body>
</html>"""

DBLP_URL = "https://dblp.org/search?q=deep+learning"

DBLP_HTML = """<html>
<head><title>dblp: search deep learning</title></head>
<body>
<header id="banner"><h1>dblp</h1><p>computer science bibliography</p></header>
<ul class="publ-list">
  <li class="entry article" id="e1">
    <cite class="data"><span itemprop="author"><a href="/pid/1">Ann Author</a></span>,
    <span class="title">Deep learning for graphs.</span> <span itemprop="datePublished">2021</span></cite>
  </li>
  <li class="entry inproceedings" id="e2">
    <cite class="data"><span itemprop="author"><a href="/pid/2">Bob Writer</a></span>,
    <span class="title">Convolutional nets revisited.</span> <span itemprop="datePublished">2018</span></cite>
  </li>
  <li class="entry article" id="e3">
    <cite class="data"><span itemprop="author"><a href="/pid/3">Cy Coder</a></span>,
    <span class="title">Attention everywhere.</span> <span itemprop="datePublished">2023</span></cite>
  </li>
</ul>
</body>
</html>"""

DBLP_INFERRED = {
    "name": "DBLP",
    "url": "https://dblp.org",
    "domain": "bibliographic",
    "search_url": "https://dblp.org/search?q={query}",
    "search_params": {"q": "query"},
    "selectors": {
        "resultContainer": "li.entry",
        "title": ".title",
        "titleLink": "",
        "authors": "",
        "authorLinks": "span[itemprop=author] a",
        "date": "span[itemprop=datePublished]",
        "abstract": "",
        "citations": "",
    },
    "semantic_structure": {"type": "ConferencePaper"},
}


class FakeFetcher:
    def __init__(self, result: FetchResult):
        self.result = result
        self.urls = []

    async def fetch(self, url):
        self.urls.append(url)
        return self.result


class FakeInferrer:
    def __init__(self, raw):
        self.raw = raw
        self.calls = []

    async def infer(self, simplified_html, url, page_title):
        self.calls.append((simplified_html, url, page_title))
        return self.raw


class FakeParser:
    def __init__(self, command):
        self.command = command

    async def parse(self, instruction):
        return self.command


class FakeLLMClient:
    """Returns canned JSON replies; records prompts"""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def ainvoke_json(self, system_prompt, user_message):
        self.calls.append((system_prompt, user_message))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def scholar_html():
    return SCHOLAR_HTML


@pytest.fixture
def dblp_html():
    return DBLP_HTML
