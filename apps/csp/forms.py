from django import forms

from .attributes import DataAttribute
from .constants import SANDBOX_VALUES
from .exceptions import InvalidValue
from .iframe import EmbeddedFrame

INPUT_CLASSES = 'vintage-input'


class IframeForm(forms.Form):
    """Validates an iframe content element before it is stored or rendered.

    Unlike ``EmbeddedFrame``, which silently drops malformed data
    attributes, the form reports them back to the author.
    """

    src = forms.URLField(
        max_length=2048,
        assume_scheme='https',
        widget=forms.URLInput(attrs={
            'class': INPUT_CLASSES,
            'placeholder': 'https://www.example.com/embed/...',
        }),
    )
    name = forms.CharField(
        max_length=255,
        required=False,
        widget=forms.TextInput(attrs={'class': INPUT_CLASSES}),
    )
    css_class = forms.CharField(
        max_length=255,
        required=False,
        widget=forms.TextInput(attrs={'class': INPUT_CLASSES}),
    )
    width = forms.IntegerField(
        min_value=0,
        required=False,
        widget=forms.NumberInput(attrs={'class': INPUT_CLASSES}),
    )
    height = forms.IntegerField(
        min_value=0,
        required=False,
        widget=forms.NumberInput(attrs={'class': INPUT_CLASSES}),
    )
    sandbox = forms.MultipleChoiceField(
        choices=[(value, value) for value in SANDBOX_VALUES],
        required=False,
        widget=forms.CheckboxSelectMultiple,
    )
    allow_full_screen = forms.BooleanField(required=False)
    allow_payment_request = forms.BooleanField(required=False)
    data_attributes = forms.CharField(
        max_length=1024,
        required=False,
        widget=forms.TextInput(attrs={
            'class': INPUT_CLASSES,
            'placeholder': 'name: value; other: value',
        }),
    )

    def clean_src(self):
        src = self.cleaned_data['src']
        try:
            EmbeddedFrame(src)
        except InvalidValue as exc:
            raise forms.ValidationError(str(exc))
        return src

    def clean_data_attributes(self):
        definition = self.cleaned_data['data_attributes'].strip()
        try:
            DataAttribute.generate_attributes_from_string(definition)
        except InvalidValue as exc:
            raise forms.ValidationError(str(exc))
        return definition

    def to_config(self):
        """Return the cleaned data in the iframe content-authoring shape."""
        data = self.cleaned_data
        return {
            'src': data['src'],
            'class': data['css_class'],
            'name': data['name'],
            'width': data['width'] or 0,
            'height': data['height'] or 0,
            'sandbox': ','.join(data['sandbox']),
            'allowFullScreen': data['allow_full_screen'],
            'allowPaymentRequest': data['allow_payment_request'],
            'dataAttributes': data['data_attributes'],
        }
