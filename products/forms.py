from django import forms

from blockchain.exceptions import InvalidInput
from blockchain.stages import get_stages
from blockchain.utils import parse_timestamp


def status_choices(stages=None):
    """Aceita o label do estado ('Retail') e o nome do role ('Retailer')."""
    choices = []
    for stage in stages or get_stages():
        choices.append((stage.status, stage.status))
        if stage.role != stage.status:
            choices.append((stage.role, stage.role))
    return choices


# --- Formulário de Sincronização (Distribuidor -> Consumidor) ---
class ProductSyncForm(forms.Form):
    origin_key = forms.CharField(max_length=100, label='Distributor Product ID')
    name = forms.CharField(max_length=200)
    origin = forms.CharField(max_length=200)
    status = forms.ChoiceField(choices=())
    # Raw value: ISO-8601 string or epoch millis
    timestamp = forms.Field(required=False)

    def __init__(self, *args, stages=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['status'].choices = status_choices(stages)

    @classmethod
    def from_payload(cls, payload, **kwargs):
        """Mapeia o JSON da API (camelCase) para os campos do formulário."""
        data = {
            'origin_key': payload.get('distributorProductId'),
            'name': payload.get('name'),
            'origin': payload.get('origin'),
            'status': payload.get('status'),
            'timestamp': payload.get('timestamp'),
        }
        return cls(data=data, **kwargs)

    def clean_timestamp(self):
        try:
            return parse_timestamp(self.cleaned_data.get('timestamp'))
        except InvalidInput as exc:
            raise forms.ValidationError(exc.errors.get('timestamp', [exc.message]))
