import unittest

from gravifon.db.view_query_arguments import ViewQueryArguments


class ViewQueryArgumentsTestCase(unittest.TestCase):

    def test_no_arguments_by_default(self):
        self.assertEqual(ViewQueryArguments().arguments, {})

    def test_string_key_is_json_encoded(self):
        args = ViewQueryArguments().add_key("nick cave")
        self.assertEqual(args.arguments, {"key": '"nick cave"'})

    def test_array_keys_are_json_encoded(self):
        args = ViewQueryArguments() \
            .add_start_key(["u1", [2013, 5, 1, 0, 0, 0, 0]]) \
            .add_end_key(["u1", {}])
        self.assertEqual(args.arguments, {
            "startkey": '["u1",[2013,5,1,0,0,0,0]]',
            "endkey": '["u1",{}]',
        })

    def test_literal_arguments(self):
        args = ViewQueryArguments() \
            .add_include_docs(True) \
            .add_limit(26) \
            .add_descending() \
            .add_inclusive_end(False)
        self.assertEqual(args.arguments, {
            "include_docs": "true",
            "limit": "26",
            "descending": "true",
            "inclusive_end": "false",
        })

    def test_zero_limit(self):
        self.assertEqual(ViewQueryArguments().add_limit(0).arguments, {"limit": "0"})

    def test_negative_limit(self):
        with self.assertRaises(ValueError):
            ViewQueryArguments().add_limit(-1)

    def test_arguments_are_not_shared(self):
        first = ViewQueryArguments().add_limit(1)
        second = ViewQueryArguments()
        self.assertEqual(second.arguments, {})
        self.assertEqual(first.arguments, {"limit": "1"})
