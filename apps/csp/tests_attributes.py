from django.test import SimpleTestCase

from .attributes import DataAttribute
from .exceptions import InvalidValue

NAME_ERROR = (
    'Name should be a valid xml name, must not start with "xml" '
    'and semicolons are not allowed, "{}" given'
)


class DataAttributeTest(SimpleTestCase):
    """Ensure data attribute names are validated and values escaped."""

    def assertInvalidName(self, name):
        with self.assertRaises(InvalidValue) as ctx:
            DataAttribute(name, 'test')
        self.assertEqual(str(ctx.exception), NAME_ERROR.format(name))
        self.assertEqual(ctx.exception.code, 15057512312)

    def test_creates_valid_attribute(self):
        attribute = DataAttribute('test', 'test')
        self.assertEqual(attribute.name, 'data-test')
        self.assertEqual(attribute.value, 'test')

    def test_semicolons_not_allowed_in_name(self):
        self.assertInvalidName('a;b')

    def test_xml_not_allowed_at_the_beginning(self):
        self.assertInvalidName('xml-test')
        self.assertInvalidName('XML-test')

    def test_xml_allowed_if_not_at_the_beginning(self):
        self.assertEqual(DataAttribute('test-xml', 'test').name, 'data-test-xml')

    def test_name_should_be_valid_xml_name(self):
        self.assertInvalidName('a<b>c')
        self.assertInvalidName('1abc')

    def test_whitespace_not_allowed_in_name(self):
        self.assertInvalidName('test \t\n test')

    def test_capital_letters_are_lowered(self):
        self.assertEqual(DataAttribute('Test', 'test').name, 'data-test')

    def test_name_ensured_by_set(self):
        attribute = DataAttribute('test', 'test')
        with self.assertRaises(InvalidValue):
            attribute.name = 'a<b>c'
        self.assertEqual(attribute.name, 'data-test')

    def test_name_can_change(self):
        attribute = DataAttribute('test1', 'test')
        attribute.name = 'test2'
        self.assertEqual(attribute.name, 'data-test2')

    def test_data_prefix_added_only_once(self):
        self.assertEqual(DataAttribute('data-test', 'test').name, 'data-test')

    def test_value_escaped_in_constructor(self):
        attribute = DataAttribute('data-test', '/><script>alert(\'ok\');</script>')
        self.assertEqual(
            attribute.value,
            '/&gt;&lt;script&gt;alert(&#x27;ok&#x27;);&lt;/script&gt;',
        )

    def test_value_escaped_by_set(self):
        attribute = DataAttribute('data-test')
        self.assertIsNone(attribute.value)
        attribute.value = '"><b>'
        self.assertEqual(attribute.value, '&quot;&gt;&lt;b&gt;')


class GenerateFromStringTest(SimpleTestCase):
    """Ensure attribute definitions are parsed segment by segment."""

    def test_single_attribute(self):
        attribute = DataAttribute.generate_attribute_from_string('attr1: value1')
        self.assertEqual(attribute.name, 'data-attr1')
        self.assertEqual(attribute.value, 'value1')

    def test_single_empty_definition_returns_none(self):
        self.assertIsNone(DataAttribute.generate_attribute_from_string(''))
        self.assertIsNone(DataAttribute.generate_attribute_from_string('   '))

    def test_second_separator_kept_in_value(self):
        attribute = DataAttribute.generate_attribute_from_string('attr1: value1:value2')
        self.assertEqual(attribute.value, 'value1:value2')

    def test_name_without_separator_has_no_value(self):
        attribute = DataAttribute.generate_attribute_from_string('attr2')
        self.assertEqual(attribute.name, 'data-attr2')
        self.assertIsNone(attribute.value)

    def test_multiple_attributes(self):
        attributes = DataAttribute.generate_attributes_from_string('attr1: value1; attr2')
        self.assertEqual(len(attributes), 2)
        self.assertEqual(attributes[1].name, 'data-attr2')

    def test_empty_definition_returns_none(self):
        self.assertIsNone(DataAttribute.generate_attributes_from_string(''))

    def test_blank_segments_ignored(self):
        attributes = DataAttribute.generate_attributes_from_string(
            'attr1: value1;;  ;      ; data-attr2 '
        )
        self.assertEqual(len(attributes), 2)
        self.assertEqual(attributes[1].name, 'data-attr2')

    def test_invalid_segment_raises(self):
        with self.assertRaises(InvalidValue):
            DataAttribute.generate_attributes_from_string('ok: 1; xml-bad: 2')
