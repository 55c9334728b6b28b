import pytest

from nigraph._utils.docs import docdict, fill_doc


def test_fill_doc():
    @fill_doc
    def func(img, verbose=0):
        """Do nothing.

        Parameters
        ----------
        %(img)s
        %(verbose0)s
        """

    assert "img : :obj:`str`" in func.__doc__
    assert "verbose : :obj:`int`, default=0" in func.__doc__
    assert "%(" not in func.__doc__


def test_fill_doc_unknown_entry():
    def func():
        """Do nothing with %(not_an_entry)s."""

    with pytest.raises(RuntimeError, match="not_an_entry"):
        fill_doc(func)


@pytest.mark.parametrize("name", ["interp_order", "strategy", "resolution"])
def test_docdict_entries(name):
    assert docdict[name].lstrip().startswith(name)


def test_fill_doc_indentation():
    class _Extractor:
        @fill_doc
        def transform(self, verbose=0):
            """Extract signals.

            Parameters
            ----------
            %(verbose0)s
            """

    assert (
        "\n            verbose : :obj:`int`, default=0\n"
        "                Verbosity level"
    ) in _Extractor.transform.__doc__
