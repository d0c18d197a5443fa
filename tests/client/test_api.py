import hashlib

import pytest

import intlang
from intlang.client import API, APIError
from tests.fixtures.fakewiki import ACCESS_TOKEN, CSRF_TOKEN, DOMAIN


class test_query_continue:
    def test_params_is_dict(self, api):
        with pytest.raises(ValueError):
            next(api.query_continue(params=0))

    def test_params_kwargs(self, api):
        with pytest.raises(ValueError):
            next(api.query_continue(params={"foo": 0}, bar=1))

    def test_continuation(self, api, fake_wiki):
        fake_wiki.languages = ["en", "de", "fr", "cs", "ja"]
        chunks = list(api.query_continue(meta="languageinfo", liprop="code"))
        assert len(chunks) == 3
        codes = [code for chunk in chunks for code in chunk["languageinfo"]]
        assert codes == ["en", "de", "fr", "cs", "ja"]

    def test_continue_params(self, api, fake_wiki):
        list(api.query_continue(meta="languageinfo", liprop="code"))
        first, second = fake_wiki.requests
        assert first.url.params["continue"] == ""
        assert "licontinue" not in first.url.params
        assert second.url.params["continue"] == "-||"
        assert second.url.params["licontinue"] == "2"

    def test_params_not_modified(self, api):
        params = {"meta": "languageinfo", "liprop": "code"}
        list(api.query_continue(params))
        assert params == {"meta": "languageinfo", "liprop": "code"}

    def test_lazy(self, api, fake_wiki):
        gen = api.query_continue(meta="languageinfo", liprop="code")
        assert fake_wiki.requests == []
        next(gen)
        assert len(fake_wiki.requests) == 1


class test_csrftoken:
    def test_cached(self, api, fake_wiki):
        assert api._csrftoken == CSRF_TOKEN
        assert api._csrftoken == CSRF_TOKEN
        assert len(fake_wiki.requests) == 1
        assert fake_wiki.requests[0].url.params["type"] == "csrf"

    def test_per_connection(self, api, fake_wiki):
        other = API.from_domain(DOMAIN, access_token=ACCESS_TOKEN)
        assert api._csrftoken == CSRF_TOKEN
        fake_wiki.expire_token()
        assert other._csrftoken == fake_wiki.csrf_token
        assert api._csrftoken == CSRF_TOKEN

    def test_reset(self, api, fake_wiki):
        assert api._csrftoken == CSRF_TOKEN
        fake_wiki.expire_token()
        del api._csrftoken
        assert api._csrftoken == fake_wiki.csrf_token
        assert len(fake_wiki.requests) == 2

    def test_call_with_csrftoken(self, api, fake_wiki):
        api.call_with_csrftoken(action="edit", title="Foo", text="bar")
        assert fake_wiki.edits[0]["token"] == CSRF_TOKEN
        assert fake_wiki.pages == {"Foo": "bar"}

    def test_badtoken_renewed_once(self, api, fake_wiki):
        assert api._csrftoken == CSRF_TOKEN
        fake_wiki.expire_token()
        api.call_with_csrftoken(action="edit", title="Foo", text="bar")
        assert [edit["token"] for edit in fake_wiki.edits] == [
            CSRF_TOKEN,
            fake_wiki.csrf_token,
        ]
        assert fake_wiki.pages == {"Foo": "bar"}

    def test_badtoken_twice(self, api, fake_wiki):
        fake_wiki.fail_edit("Foo", "badtoken")
        with pytest.raises(APIError) as excinfo:
            api.call_with_csrftoken(action="edit", title="Foo", text="bar")
        assert excinfo.value.codes == ["badtoken"]
        assert len(fake_wiki.edits) == 2

    def test_other_error_not_retried(self, api, fake_wiki):
        fake_wiki.fail_edit("Foo", "protectedpage")
        with pytest.raises(APIError):
            api.call_with_csrftoken(action="edit", title="Foo", text="bar")
        assert len(fake_wiki.edits) == 1


class test_create:
    def test_create(self, api, fake_wiki):
        result = api.create("Foo", "bar", "summary")
        assert result["result"] == "Success"
        assert result["new"] is True
        params = fake_wiki.edits[0]
        assert params["title"] == "Foo"
        assert params["text"] == "bar"
        assert params["summary"] == "summary"
        assert params["createonly"] == "1"
        assert params["md5"] == hashlib.md5(b"bar").hexdigest()

    def test_unicode_md5(self, api, fake_wiki):
        api.create("Foo", "čeština", "summary")
        assert fake_wiki.edits[0]["md5"] == hashlib.md5("čeština".encode("utf-8")).hexdigest()

    def test_extra_params(self, api, fake_wiki):
        api.create("Foo", "bar", "summary", bot=True, watchlist="unwatch")
        params = fake_wiki.edits[0]
        assert params["bot"] == "1"
        assert params["watchlist"] == "unwatch"

    def test_exists(self, api, fake_wiki):
        fake_wiki.pages["Foo"] = "old"
        with pytest.raises(APIError) as excinfo:
            api.create("Foo", "bar", "summary")
        assert excinfo.value.codes == ["articleexists"]
        assert fake_wiki.pages["Foo"] == "old"

    @pytest.mark.parametrize("summary", ["", "x" * 256])
    def test_invalid_summary(self, api, fake_wiki, summary):
        with pytest.raises(ValueError):
            api.create("Foo", "bar", summary)
        assert fake_wiki.requests == []

    def test_rate_limited(self, api, fake_wiki, monkeypatch, mocker):
        monkeypatch.setattr(intlang, "_tests_are_running", False)
        sleep = mocker.patch("intlang.utils.rate.time.sleep")
        api.create("Foo", "foo", "summary")
        api.create("Bar", "bar", "summary")
        assert sleep.call_count == 1
        assert sleep.call_args.args[0] == pytest.approx(3, abs=0.5)
        assert fake_wiki.pages == {"Foo": "foo", "Bar": "bar"}
