"""
Tests de carga del catálogo mayorista y sus fallbacks
"""
from datetime import datetime
import pytest
from pathlib import Path
import sys

# Agregar path del proyecto
sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import FakeFuente, precio
from core.errors import CatalogUnavailable
from matching.catalog_loader import (
    CatalogLoader,
    generate_canonical_name,
    generate_group_key,
    normalize_raw_product_name
)


class TestFallbackPeriodos:
    """Tests para la cadena de fallback de períodos"""

    def test_periodo_exacto(self, catalogo_docs):
        """Test: Si hay precios del mes se usan esos"""
        index = CatalogLoader(FakeFuente(precios=catalogo_docs)).load(2025, 10)

        assert index.nivel == 'exacto'
        assert (index.year, index.month) == (2025, 10)
        assert len(index) == len(catalogo_docs)

    def test_ultimo_mes_del_anio(self):
        """Test: Sin precios del mes, usa el último mes disponible del mismo año"""
        fuente = FakeFuente(precios=[
            precio('POLLO', '10KG', month=3),
            precio('VACA', '10KG', month=7),
        ])
        index = CatalogLoader(fuente).load(2025, 10)

        assert index.nivel == 'mismo_anio'
        assert index.month == 7
        assert [p.product for p in index.productos] == ['VACA']

    def test_mas_recientes_de_cualquier_anio(self):
        """Test: Sin precios en el año, usa los más recientes de cualquier año"""
        fuente = FakeFuente(precios=[
            precio('POLLO', '10KG', year=2023, month=12),
            precio('VACA', '10KG', year=2024, month=11),
        ])
        index = CatalogLoader(fuente).load(2025, 10)

        assert index.nivel == 'historico'
        assert (index.year, index.month) == (2024, 11)
        assert len(index) == 2

    def test_sin_precios_es_fatal(self):
        """Test: CatalogUnavailable sólo si no hay registros en ningún nivel"""
        with pytest.raises(CatalogUnavailable):
            CatalogLoader(FakeFuente()).load(2025, 10)

    def test_ignora_inactivos_y_minoristas(self):
        fuente = FakeFuente(precios=[
            precio('POLLO', '10KG', isActive=False),
            precio('VACA', '10KG', priceType='MINORISTA'),
            precio('CERDO', '10KG'),
        ])
        index = CatalogLoader(fuente).load(2025, 10)

        assert [p.product for p in index.productos] == ['CERDO']


class TestConstruccionIndice:
    """Tests para normalización, deduplicación e índice por sección"""

    def test_misma_clave_en_distintas_secciones_no_colisiona(self, catalogo):
        """Test: POLLO 5KG de PERRO y de GATO son productos distintos"""
        perro = catalogo.get('PERRO', 'POLLO 5KG')
        gato = catalogo.get('GATO', 'POLLO 5KG')

        assert perro is not None and gato is not None
        assert perro.section == 'PERRO'
        assert gato.section == 'GATO'
        assert perro.canonical_name == 'PERRO POLLO'
        assert gato.canonical_name == 'GATO POLLO'

    def test_normaliza_nombres(self):
        fuente = FakeFuente(precios=[precio('  pollo  ', ' 10kg', section='perro')])
        producto = CatalogLoader(fuente).load(2025, 10).productos[0]

        assert producto.product == 'POLLO'
        assert producto.full_name == 'POLLO 10KG'
        assert producto.section == 'PERRO'
        assert producto.kilos_per_unit == 10

    def test_duplicados_gana_el_mas_reciente(self):
        """Test: Ante (sección, fullName) repetidos queda el precio más reciente"""
        viejo = precio('POLLO', '10KG', effectiveDate=datetime(2025, 10, 1), _id='viejo')
        nuevo = precio('pollo', '10KG', effectiveDate=datetime(2025, 10, 15), _id='nuevo')
        loader = CatalogLoader(FakeFuente())

        index = loader.build_index([nuevo, viejo], 2025, 10)
        assert len(index) == 1

    def test_defaults_peso_y_seccion(self):
        """Test: Sin peso → UNIDAD y kilos 1; sin sección → OTROS"""
        fuente = FakeFuente(precios=[precio('GARRAS', '', section='')])
        producto = CatalogLoader(fuente).load(2025, 10).productos[0]

        assert producto.weight == 'UNIDAD'
        assert producto.kilos_per_unit == 1
        assert producto.section == 'OTROS'

    def test_candidatos_por_seccion(self, catalogo):
        assert {p.section for p in catalogo.candidatos('GATO')} == {'GATO'}
        assert len(catalogo.candidatos(None)) == len(catalogo)
        assert catalogo.candidatos('INEXISTENTE') == ()

    def test_product_names_unicos_y_ordenados(self, catalogo):
        names = catalogo.product_names()

        assert names[:2] == ['BIG DOG POLLO', 'BIG DOG VACA']
        assert names.count('PERRO POLLO') == 1
        assert names.index('PERRO POLLO') < names.index('GATO POLLO')
        assert names[-1].startswith('RAW -')

    def test_indice_inmutable(self, catalogo):
        with pytest.raises(TypeError):
            catalogo.por_clave['X||Y'] = None


class TestNombres:
    """Tests para groupKey y nombre canónico"""

    def test_group_key_basico(self):
        assert generate_group_key('POLLO', 'PERRO') == 'PERRO - POLLO'

    def test_group_key_big_dog_conserva_nombre(self):
        assert generate_group_key('BIG DOG VACA', 'PERRO') == 'PERRO - BIG DOG VACA'

    @pytest.mark.parametrize('product', ['OREJA X50', 'OREJAS X100', 'OREJA X1', 'OREJAS'])
    def test_group_key_orejas_colapsa(self, product):
        """Test: Todas las presentaciones de orejas comparten grupo"""
        assert generate_group_key(product, 'RAW') == 'RAW - OREJA'

    def test_normalize_raw_plurales(self):
        assert normalize_raw_product_name('higados') == 'HIGADO'
        assert normalize_raw_product_name('TRAQUEA') == 'TRAQUEA'

    @pytest.mark.parametrize('product, section, weight, expected', [
        ('POLLO', 'PERRO', '10KG', 'PERRO POLLO'),
        ('BIG DOG POLLO', 'PERRO', '15KG', 'BIG DOG POLLO'),
        ('VACA', 'GATO', '5KG', 'GATO VACA'),
        ('HIGADO', 'RAW', '100GRS', 'RAW - HIGADO 100GRS'),
        ('TRAQUEA', 'RAW', 'UNIDAD', 'RAW - TRAQUEA'),
        ('OREJAS', 'RAW', 'X50', 'RAW - OREJAS'),
        ('POLLO', 'BOX PERRO', '', 'BOX PERRO POLLO'),
    ])
    def test_nombre_canonico(self, product, section, weight, expected):
        assert generate_canonical_name(product, section, weight) == expected
