"""
LitPDF CLI

사용법:
    litpdf document.pdf
    litpdf document.pdf --texts --page 0
    litpdf document.pdf --references --json
"""

import sys
import logging
import argparse
from pathlib import Path


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog='litpdf',
        description='LitPDF - Lightweight PDF Structure Parser',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
출력 선택 (여러 개 지정 가능, 없으면 전체 텍스트):
  --texts       페이지 텍스트 조각 (위치, 크기 포함)
  --operations  페이지 Content Stream 연산
  --meta        trailer 딕셔너리
  --pages       Pages 노드
  --grand-kids  페이지 트리 두 번째 단계
  --first-page  첫 페이지 객체
  --cmap        CMap 스트림
  --babel       문자 코드 맵
  --nth N       N번 객체
  --all         모든 객체
  --references  모든 참조

예시:
  litpdf document.pdf
  litpdf document.pdf --texts --page 1
  litpdf document.pdf --all --json -o objects.json
'''
    )

    parser.add_argument('file', help='PDF 파일 경로')
    parser.add_argument('--texts', '-t', action='store_true', help='텍스트 조각 출력')
    parser.add_argument('--operations', action='store_true', help='연산 출력')
    parser.add_argument('--grand-kids', '-g', action='store_true', help='페이지 트리 손자 노드 출력')
    parser.add_argument('--meta', '-m', action='store_true', help='trailer 출력')
    parser.add_argument('--cmap', '-c', action='store_true', help='CMap 스트림 출력')
    parser.add_argument('--pages', '-p', action='store_true', help='Pages 노드 출력')
    parser.add_argument('--first-page', '-f', action='store_true', help='첫 페이지 객체 출력')
    parser.add_argument('--babel', '-b', action='store_true', help='문자 코드 맵 출력')
    parser.add_argument('--nth', '-n', type=int, help='특정 객체 번호 출력')
    parser.add_argument('--all', '-a', action='store_true', help='모든 객체 출력')
    parser.add_argument('--references', '-r', action='store_true', help='모든 참조 출력')
    parser.add_argument('--page', type=int, default=0, help='텍스트/연산 대상 페이지 (0부터)')
    parser.add_argument('--json', '-j', action='store_true', help='JSON으로 출력')
    parser.add_argument('--output', '-o', help='출력 파일')
    parser.add_argument('--verbose', '-v', action='store_true', help='디버그 로그')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    filepath = Path(args.file)
    if not filepath.exists():
        print(f"오류: 파일을 찾을 수 없습니다: {filepath}", file=sys.stderr)
        sys.exit(1)

    try:
        from . import parse_pdf, build_code_map, get_pages, get_operations, extract_text_runs, extract_all_text
        from . import output_formatter as fmt

        doc = parse_pdf(str(filepath))

        sections = []  # (이름, 텍스트, JSON 데이터)

        if args.meta:
            sections.append(('meta', fmt.format_value(doc.trailer), fmt.to_python(doc.trailer)))

        if args.pages:
            pages = doc.pages()
            sections.append((
                'pages',
                fmt.format_object(pages) if pages else '',
                fmt.object_to_dict(pages) if pages else None,
            ))

        if args.grand_kids:
            kids = doc.pages_grand_kids()
            sections.append((
                'grand_kids',
                '\n\n'.join(fmt.format_object(obj) for obj in kids),
                [fmt.object_to_dict(obj) for obj in kids],
            ))

        if args.first_page:
            pages = get_pages(doc)
            first = pages[0] if pages else None
            sections.append((
                'first_page',
                fmt.format_object(first) if first else '',
                fmt.object_to_dict(first) if first else None,
            ))

        if args.cmap:
            cmaps = doc.cmap_streams_of_type('CMap') + doc.to_unicode_streams()
            sections.append((
                'cmap',
                '\n\n'.join(obj.stream.decode('latin-1') for obj in cmaps),
                [fmt.object_to_dict(obj, include_streams=True) for obj in cmaps],
            ))

        if args.babel:
            code_map = build_code_map(doc)
            sections.append((
                'babel',
                fmt.format_code_map(code_map),
                {f"{code:04X}": char for code, char in sorted(code_map.items())},
            ))

        if args.nth is not None:
            matches = [obj for obj in doc.objects.values() if obj.obj_num == args.nth]
            if not matches:
                print(f"오류: 객체를 찾을 수 없습니다: {args.nth}", file=sys.stderr)
                sys.exit(1)
            sections.append((
                'nth',
                '\n\n'.join(fmt.format_object(obj) for obj in matches),
                [fmt.object_to_dict(obj) for obj in matches],
            ))

        if args.all:
            sections.append((
                'objects',
                '\n\n'.join(fmt.format_object(obj) for obj in doc.objects.values()),
                fmt.document_to_dict(doc)['objects'],
            ))

        if args.references:
            references = doc.all_references()
            sections.append((
                'references',
                fmt.format_references(references),
                [
                    {
                        'owner': list(info.owner),
                        'path': list(info.path),
                        'target': list(info.ref.id),
                        'dangling': info.target is None,
                    }
                    for info in references
                ],
            ))

        if args.operations:
            operations = get_operations(doc, args.page)
            sections.append((
                'operations',
                fmt.format_operations(operations),
                [{'op': o.op, 'operands': [str(t) for t in o.operands]} for o in operations],
            ))

        if args.texts:
            runs = extract_text_runs(doc, args.page)
            sections.append(('texts', fmt.format_runs(runs), fmt.runs_to_dict(runs)))

        # 기본: 전체 텍스트
        if not sections:
            text = extract_all_text(doc)
            sections.append(('text', text, text))

        if args.json:
            output = fmt.to_json({name: data for name, _, data in sections})
        else:
            output = '\n\n'.join(text for _, text, _ in sections)

        # 출력
        if args.output:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(output)
            print(f"저장됨: {args.output}", file=sys.stderr)
        else:
            print(output)

    except Exception as e:
        print(f"오류: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
