"""
Reportes Mayoristas Barfer - Línea de comandos

Flujo:
1. Conecta a MongoDB (solo lectura)
2. Ejecuta el reporte pedido (matriz, estadísticas o rollups mensuales)
3. Exporta el resultado a Excel (una hoja por tabla + hoja de Diagnosticos)

Uso:
    python main.py matriz --year 2025 --month 10
    python main.py matriz --year 2025 --month 10 --desde 2025-10-01 --hasta 2025-10-15 --workers 4
    python main.py estadisticas --desde 2025-01-01 --hasta 2025-10-31
    python main.py entregas --desde 2025-01-01 --hasta 2025-10-31 --debug
    python main.py cantidades --desde 2025-01-01
    python main.py categorias --year 2025 --month 10
"""
import sys
import logging
import argparse
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from config import MongoConfig
from db import DatabaseConnection, MongoRepository
from reportes import (
    get_productos_matrix,
    get_puntos_venta_stats,
    get_delivery_type_stats_by_month,
    get_quantity_stats_by_month,
    get_category_buckets_by_punto_venta
)

logger = logging.getLogger(__name__)

REPORTES = ('matriz', 'estadisticas', 'entregas', 'cantidades', 'categorias')


def configurar_logging(debug: bool = False):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Modo DEBUG activado")


# ==========================================
# CONVERSIÓN A DATAFRAMES
# ==========================================

def hojas_matriz(resultado: Dict[str, Any]) -> Dict[str, pd.DataFrame]:
    product_names = resultado['productNames']
    filas = []
    for fila in resultado['matrix']:
        registro = {'Punto de venta': fila['puntoVentaNombre'], 'Zona': fila['zona']}
        registro.update({name: fila['productos'].get(name, 0) for name in product_names})
        registro['Total Kilos'] = fila['totalKilos']
        filas.append(registro)

    columnas = ['Punto de venta', 'Zona'] + product_names + ['Total Kilos']
    return {'Matriz': pd.DataFrame(filas, columns=columnas)}


def hojas_estadisticas(resultado: Dict[str, Any]) -> Dict[str, pd.DataFrame]:
    return {'Puntos de venta': pd.DataFrame(resultado['stats'])}


def hojas_entregas(resultado: Dict[str, Any]) -> Dict[str, pd.DataFrame]:
    return {'Tipo de entrega': pd.DataFrame(resultado['stats'])}


def hojas_cantidades(resultado: Dict[str, Any]) -> Dict[str, pd.DataFrame]:
    return {client_type: pd.DataFrame(filas) for client_type, filas in resultado['stats'].items()}


def hojas_categorias(resultado: Dict[str, Any]) -> Dict[str, pd.DataFrame]:
    filas = []
    for punto_venta in resultado['puntosVenta']:
        for mes in punto_venta['meses']:
            registro = {'Punto de venta': punto_venta['puntoVentaNombre'], 'Zona': punto_venta['zona']}
            registro.update(mes)
            filas.append(registro)
    return {'Sabores': pd.DataFrame(filas)}


def hoja_diagnosticos(diagnosticos: Dict[str, Any]) -> pd.DataFrame:
    """Aplana los diagnósticos en una tabla (tipo + detalle)"""
    filas: List[Dict[str, Any]] = []
    for tipo, clave in (('Sin match', 'sinMatch'),
                        ('Orden malformada', 'ordenesMalformadas')):
        for registro in diagnosticos.get(clave, []):
            filas.append({'Tipo': tipo, **registro})
    return pd.DataFrame(filas, columns=['Tipo', 'puntoVentaId', 'orderId', 'item', 'motivo', 'detalle'])


CONVERSORES = {
    'matriz': hojas_matriz,
    'estadisticas': hojas_estadisticas,
    'entregas': hojas_entregas,
    'cantidades': hojas_cantidades,
    'categorias': hojas_categorias
}


def exportar_xlsx(reporte: str, resultado: Dict[str, Any], output_path: Path) -> Path:
    """
    Guarda el resultado de un reporte en Excel

    Args:
        reporte: Nombre del reporte (clave de CONVERSORES)
        resultado: Envelope exitoso del reporte
        output_path: Archivo de salida

    Returns:
        Ruta del archivo generado
    """
    hojas = CONVERSORES[reporte](resultado)
    diagnosticos = resultado.get('diagnosticos') or {}

    with pd.ExcelWriter(output_path, engine="xlsxwriter", datetime_format="yyyy-mm-dd") as writer:
        for nombre, df in hojas.items():
            df.to_excel(writer, sheet_name=nombre[:31], index=False)
        hoja_diagnosticos(diagnosticos).to_excel(writer, sheet_name='Diagnosticos', index=False)

    logger.info(f"  > Archivo generado: {output_path}")
    return output_path


# ==========================================
# EJECUCIÓN
# ==========================================

def ejecutar_reporte(reporte: str, fuente, args: argparse.Namespace) -> Dict[str, Any]:
    """Despacha el subcomando al servicio correspondiente"""
    if reporte == 'matriz':
        return get_productos_matrix(fuente, args.year, args.month, args.desde, args.hasta,
                                    max_workers=args.workers, debug=args.debug)
    if reporte == 'estadisticas':
        return get_puntos_venta_stats(fuente, args.desde, args.hasta,
                                      max_workers=args.workers, debug=args.debug)
    if reporte == 'entregas':
        return get_delivery_type_stats_by_month(fuente, args.desde, args.hasta, debug=args.debug)
    if reporte == 'cantidades':
        return get_quantity_stats_by_month(fuente, args.desde, args.hasta, debug=args.debug)
    if reporte == 'categorias':
        return get_category_buckets_by_punto_venta(fuente, args.year, args.month, args.desde, args.hasta,
                                                   debug=args.debug)
    raise ValueError(f"Reporte desconocido: {reporte}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Reportes Mayoristas Barfer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Ejemplos de uso:
  python main.py matriz --year 2025 --month 10
  python main.py estadisticas --desde 2025-01-01 --hasta 2025-10-31
  python main.py cantidades --desde 2025-01-01 --out cantidades.xlsx
        """
    )

    subparsers = parser.add_subparsers(dest='reporte', required=True)

    comunes = argparse.ArgumentParser(add_help=False)
    comunes.add_argument(
        '--desde',
        default=None,
        help='Fecha inicial YYYY-MM-DD (opcional)'
    )
    comunes.add_argument(
        '--hasta',
        default=None,
        help='Fecha final YYYY-MM-DD (opcional)'
    )
    comunes.add_argument(
        '--env-file',
        type=Path,
        default=None,
        help='Archivo .env con MONGODB_URI / MONGODB_DATABASE (default: .env)'
    )
    comunes.add_argument(
        '--out',
        type=Path,
        default=None,
        help='Archivo Excel de salida (default: <reporte>.xlsx)'
    )
    comunes.add_argument(
        '--workers',
        type=int,
        default=1,
        help='Hilos para procesar puntos de venta (default: 1)'
    )
    comunes.add_argument(
        '--debug',
        action='store_true',
        help='Activar modo debug (logs detallados)'
    )

    periodo = argparse.ArgumentParser(add_help=False)
    periodo.add_argument('--year', type=int, required=True, help='Año del catálogo')
    periodo.add_argument('--month', type=int, required=True, help='Mes del catálogo (1-12)')

    subparsers.add_parser('matriz', parents=[comunes, periodo],
                          help='Matriz productos x puntos de venta')
    subparsers.add_parser('estadisticas', parents=[comunes],
                          help='Estadísticas de compra por punto de venta activo')
    subparsers.add_parser('entregas', parents=[comunes],
                          help='Órdenes, facturación y kilos por mes y tipo de entrega')
    subparsers.add_parser('cantidades', parents=[comunes],
                          help='Kilos por sabor, mes y tipo de cliente')
    subparsers.add_parser('categorias', parents=[comunes, periodo],
                          help='Kilos por sabor y mes de cada punto de venta')

    return parser


def main(argv=None) -> int:
    """Punto de entrada principal"""
    args = build_parser().parse_args(argv)
    configurar_logging(args.debug)

    try:
        config = MongoConfig.from_env(args.env_file)
        logger.info(f"Configuracion de BD: {config}")
    except Exception as e:
        logger.error(f"Error cargando configuracion de BD: {e}")
        logger.error("Verifica que el archivo .env existe y tiene MONGODB_URI")
        return 1

    output_path = args.out or Path(f"{args.reporte}.xlsx")

    try:
        logger.info("=" * 80)
        logger.info(f"REPORTE: {args.reporte.upper()}")
        logger.info("=" * 80)

        with DatabaseConnection(config.connection_uri(), config.database, config.timeout_ms) as db_conn:
            resultado = ejecutar_reporte(args.reporte, MongoRepository(db_conn), args)

        if not resultado.get('success'):
            logger.error(f"Reporte fallido: {resultado.get('error')}")
            return 1

        exportar_xlsx(args.reporte, resultado, output_path)

        diagnosticos = resultado.get('diagnosticos') or {}
        sin_match = len(diagnosticos.get('sinMatch', []))
        if sin_match:
            logger.warning(f"  ! {sin_match} ítems sin match (ver hoja Diagnosticos)")

        logger.info("REPORTE COMPLETADO EXITOSAMENTE")
        return 0

    except KeyboardInterrupt:
        logger.warning("\nEjecucion cancelada por el usuario")
        return 1
    except Exception as e:
        logger.error(f"\nError fatal: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
